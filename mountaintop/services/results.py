"""
Result finalization service

Records a game's result and scores its picks as one unit of work: either the
game and every pick are committed together, or the session is rolled back and
nothing changes.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from mountaintop.errors import NotFoundError, PersistenceError, ValidationError
from mountaintop.models import Game
from mountaintop.services.scoring import PickScorer
from mountaintop.utils.performance import PerformanceMonitor
from mountaintop.utils.validation import DEFAULT_MAX_SCORE, validate_game_result

logger = logging.getLogger(__name__)


class ResultFinalizer:
    def __init__(self, session, scorer=None, max_score=DEFAULT_MAX_SCORE):
        self.session = session
        self.scorer = scorer or PickScorer(session)
        self.max_score = max_score

    def finalize(self, game_id, home_score, away_score, is_final):
        """
        Set a game's scores and, when final, score all of its picks.

        Args:
            game_id: Game to update
            home_score: Home team score (required when final)
            away_score: Away team score (required when final)
            is_final: Whether the result is official

        Returns:
            Game: the updated game

        Raises:
            ValidationError: bad scores, or an attempt to un-finalize a game
            NotFoundError: game does not exist
            PersistenceError: the database rejected a write
        """
        validate_game_result(
            home_score, away_score, is_final, max_score=self.max_score
        )

        with PerformanceMonitor(f"finalize game {game_id}"):
            try:
                game = self.session.get(Game, game_id)
                if game is None:
                    raise NotFoundError(
                        f"Game {game_id} not found", {"game_id": game_id}
                    )

                if game.is_final and not is_final:
                    raise ValidationError(
                        "A final game cannot be reopened",
                        {"is_final": "Game is already final"},
                    )

                if game.is_final and (
                    game.home_score != home_score or game.away_score != away_score
                ):
                    logger.warning(
                        f"Game {game_id} re-finalized: "
                        f"{game.home_score}-{game.away_score} -> {home_score}-{away_score}"
                    )

                game.apply_result(home_score, away_score, is_final)
                self.session.add(game)
                self.session.flush()

                scored = 0
                if game.is_final:
                    scored = self.scorer.score_game(game.id)

                self.session.commit()
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(
                    f"Failed to finalize game {game_id}: {e}", exc_info=True
                )
                raise PersistenceError(
                    f"Could not save result for game {game_id}"
                ) from e
            except Exception:
                self.session.rollback()
                raise

        logger.info(
            f"Game {game_id} result saved {home_score}-{away_score} "
            f"(final={game.is_final}, picks scored={scored})"
        )
        return game
