"""
Leaderboard aggregation

Standings are computed fresh from scored picks on every call and never
stored. One aggregate query sums each user's picks; candidate users with no
matching picks are then filled in with zero totals.
"""

import logging
from collections import namedtuple

from sqlalchemy import case, func

from mountaintop.errors import NotFoundError
from mountaintop.models import Game, LeagueMembership, Pick, User, Week
from mountaintop.utils.loaders import load_by_ids
from mountaintop.utils.performance import timer
from mountaintop.utils.scoring import win_percentage

logger = logging.getLogger(__name__)

LeaderboardQuery = namedtuple(
    "LeaderboardQuery", ["season_id", "league_id"], defaults=(None, None)
)

_PickTotals = namedtuple(
    "_PickTotals", ["total_points", "correct_picks", "total_picks"]
)
_NO_PICKS = _PickTotals(0, 0, 0)


class LeaderboardEntry:
    """One user's standing; derived, never persisted"""

    def __init__(
        self,
        user_id,
        username,
        display_name,
        league_id=None,
        total_points=0,
        correct_picks=0,
        total_picks=0,
    ):
        self.user_id = user_id
        self.username = username
        self.display_name = display_name
        self.league_id = league_id
        self.total_points = total_points
        self.correct_picks = correct_picks
        self.total_picks = total_picks

    @property
    def win_pct(self):
        return win_percentage(self.total_points, self.total_picks)

    def __repr__(self):
        return (
            f"<LeaderboardEntry user_id={self.user_id} "
            f"points={self.total_points} picks={self.total_picks}>"
        )

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "username": self.username,
            "display_name": self.display_name,
            "league_id": self.league_id,
            "total_points": self.total_points,
            "correct_picks": self.correct_picks,
            "total_picks": self.total_picks,
            "win_pct": self.win_pct,
        }


class LeaderboardAggregator:
    def __init__(self, session):
        self.session = session

    @timer
    def execute(self, query):
        """
        Compute standings for a LeaderboardQuery.

        Returns:
            list of LeaderboardEntry ordered by total points descending, then
            user id ascending; empty when no user qualifies
        """
        totals = self._pick_totals(query)
        candidate_ids = self._candidate_user_ids(query) | set(totals)
        users = load_by_ids(self.session, User, candidate_ids)

        entries = [
            self._entry(user, query, totals.get(user.id, _NO_PICKS))
            for user in users.values()
        ]
        entries.sort(key=lambda entry: (-entry.total_points, entry.user_id))

        logger.debug(
            f"Leaderboard season_id={query.season_id} league_id={query.league_id}: "
            f"{len(entries)} entries"
        )
        return entries

    def user_entry(self, user_id, query):
        """Totals for a single user under the same filters as the leaderboard"""
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", {"user_id": user_id})

        totals = self._pick_totals(query, user_id=user_id)
        return self._entry(user, query, totals.get(user_id, _NO_PICKS))

    def _entry(self, user, query, totals):
        return LeaderboardEntry(
            user_id=user.id,
            username=user.username,
            display_name=user.full_name,
            league_id=query.league_id,
            total_points=totals.total_points,
            correct_picks=totals.correct_picks,
            total_picks=totals.total_picks,
        )

    def _pick_totals(self, query, user_id=None):
        correct = case((Pick.spread_correct.is_(True), 1), else_=0) + case(
            (Pick.over_under_correct.is_(True), 1), else_=0
        )
        stmt = self.session.query(
            Pick.user_id,
            func.coalesce(func.sum(Pick.points_earned), 0),
            func.coalesce(func.sum(correct), 0),
            func.count(Pick.id),
        )

        if query.season_id is not None:
            stmt = (
                stmt.join(Game, Pick.game_id == Game.id)
                .join(Week, Game.week_id == Week.id)
                .filter(Week.season_id == query.season_id)
            )
        if query.league_id is not None:
            stmt = stmt.filter(Pick.league_id == query.league_id)
        if user_id is not None:
            stmt = stmt.filter(Pick.user_id == user_id)

        rows = stmt.group_by(Pick.user_id).all()
        return {
            row_user_id: _PickTotals(int(points), int(correct_count), int(picks))
            for row_user_id, points, correct_count, picks in rows
        }

    def _candidate_user_ids(self, query):
        if query.league_id is not None:
            rows = self.session.query(LeagueMembership.user_id).filter(
                LeagueMembership.league_id == query.league_id,
                LeagueMembership.is_active.is_(True),
            )
        else:
            rows = self.session.query(User.id).filter(User.is_active.is_(True))
        return {row[0] for row in rows}


def get_leaderboard(session, season_id=None, league_id=None):
    """Convenience wrapper returning standings for the given filters"""
    return LeaderboardAggregator(session).execute(
        LeaderboardQuery(season_id=season_id, league_id=league_id)
    )
