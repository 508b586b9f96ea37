"""
Pick scoring service

Applies the rules in mountaintop/utils/scoring.py to every pick on a game and
writes the outcome back through the session it was given. The scorer only
flushes; committing or rolling back belongs to the caller's unit of work.
"""

import logging

from mountaintop.errors import NotFoundError
from mountaintop.models import Game, Pick
from mountaintop.utils.loaders import load_by_foreign_key, load_by_ids
from mountaintop.utils.performance import timer
from mountaintop.utils.scoring import score_pick

logger = logging.getLogger(__name__)


class PickScorer:
    """Scores all picks for a finalized game"""

    def __init__(self, session):
        self.session = session

    @timer
    def score_game(self, game_id):
        """
        Score every pick referencing ``game_id``.

        Safe to call repeatedly: the same result always produces the same
        flags and points.

        Returns:
            int: number of picks scored (0 when the game has no final scores)

        Raises:
            NotFoundError: game does not exist
        """
        game = self.session.get(Game, game_id)
        if game is None:
            raise NotFoundError(f"Game {game_id} not found", {"game_id": game_id})

        if game.home_score is None or game.away_score is None:
            logger.debug(f"Game {game_id} has no final score yet, nothing to score")
            return 0

        picks = load_by_foreign_key(self.session, Pick, Pick.game_id, [game_id])[
            game_id
        ]
        if not picks:
            logger.debug(f"Game {game_id} has no picks to score")
            return 0

        for pick in picks:
            result = score_pick(game, pick)
            pick.spread_correct = result.spread_correct
            pick.over_under_correct = result.over_under_correct
            pick.points_earned = result.points_earned
            self._persist(pick)

        logger.info(f"Scored {len(picks)} picks for game {game_id}")
        return len(picks)

    def score_games(self, game_ids):
        """Score several games, returning {game_id: picks scored}"""
        games = load_by_ids(self.session, Game, game_ids)
        missing = set(game_ids) - set(games)
        if missing:
            raise NotFoundError(
                "Games not found", {"game_ids": sorted(missing)}
            )
        return {game_id: self.score_game(game_id) for game_id in sorted(games)}

    def unscored_game_ids(self):
        """Ids of final games that still have picks without a result"""
        rows = (
            self.session.query(Pick.game_id)
            .join(Game, Pick.game_id == Game.id)
            .filter(
                Game.is_final.is_(True),
                (Pick.spread_correct.is_(None)) | (Pick.over_under_correct.is_(None)),
            )
            .distinct()
            .all()
        )
        return sorted(row[0] for row in rows)

    def _persist(self, pick):
        self.session.add(pick)
        self.session.flush()
