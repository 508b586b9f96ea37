"""
Pick submission service

Creates or updates a user's pick for a game within a league, enforcing
membership, the week's pick window and the game's kickoff. Also lists a
user's own picks, and a league's picks for a week once picking has closed.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from mountaintop.errors import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from mountaintop.models import Game, League, LeagueMembership, Pick, Week
from mountaintop.models.pick import OVER_UNDER_CHOICES

logger = logging.getLogger(__name__)


class PickService:
    def __init__(self, session):
        self.session = session

    def submit(
        self,
        user,
        league_id,
        game_id,
        picked_team_id,
        picked_over_under,
        confidence=None,
    ):
        """
        Upsert ``user``'s pick for (league, game).

        Returns:
            tuple of (Pick, created) where created is False for an update

        Raises:
            NotFoundError: league or game does not exist
            ForbiddenError: not a member, week closed, or game started
            ValidationError: team not in the game, or bad over/under side
        """
        league = self.session.get(League, league_id)
        if league is None or not league.is_active:
            raise NotFoundError("League not found", {"league_id": league_id})

        if not self._is_active_member(user.id, league_id):
            raise ForbiddenError("Not a member of this league")

        game = self.session.get(Game, game_id)
        if game is None:
            raise NotFoundError("Game not found", {"game_id": game_id})

        week = game.week
        if not week.is_open_for_picks():
            if week.status != "picking":
                raise ForbiddenError("Picks are locked for this week")
            raise ForbiddenError("The pick deadline for this week has passed")
        if not game.is_pickable():
            raise ForbiddenError("Cannot pick a game that has already started")

        details = {}
        if not game.involves_team(picked_team_id):
            details["picked_team_id"] = "Invalid team selection for this game"
        if picked_over_under not in OVER_UNDER_CHOICES:
            details["picked_over_under"] = "Must be 'over' or 'under'"
        if details:
            raise ValidationError("Invalid pick", details)

        pick = (
            self.session.query(Pick)
            .filter_by(league_id=league_id, user_id=user.id, game_id=game_id)
            .first()
        )
        created = pick is None
        if created:
            pick = Pick(league_id=league_id, user_id=user.id, game_id=game_id)
            self.session.add(pick)

        pick.picked_team_id = picked_team_id
        pick.picked_over_under = picked_over_under
        pick.confidence = confidence

        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(
                f"Error saving pick for user {user.id} game {game_id}: {e}",
                exc_info=True,
            )
            raise PersistenceError("Error saving pick") from e

        logger.debug(
            f"{'Created' if created else 'Updated'} pick {pick.id} for user "
            f"{user.username}, game {game_id}, league {league_id}"
        )
        return pick, created

    def list_for_user(self, user_id, league_id=None, week_id=None):
        """A user's picks, optionally narrowed to a league and/or week"""
        query = self.session.query(Pick).filter(Pick.user_id == user_id)
        if league_id is not None:
            query = query.filter(Pick.league_id == league_id)
        if week_id is not None:
            query = query.join(Game, Pick.game_id == Game.id).filter(
                Game.week_id == week_id
            )
        return query.order_by(Pick.game_id, Pick.league_id).all()

    def list_for_week(self, user, week_id, league_id):
        """
        Every member's picks in a league for one week.

        Picks stay hidden until the week closes for picking. Site admins may
        look earlier and need not belong to the league.

        Raises:
            NotFoundError: week or league does not exist
            ForbiddenError: not a member, or the week is still open
        """
        week = self.session.get(Week, week_id)
        if week is None:
            raise NotFoundError("Week not found", {"week_id": week_id})

        league = self.session.get(League, league_id)
        if league is None or not league.is_active:
            raise NotFoundError("League not found", {"league_id": league_id})

        if not user.is_admin:
            if not self._is_active_member(user.id, league_id):
                raise ForbiddenError("Not a member of this league")
            if week.is_open_for_picks():
                raise ForbiddenError("Picks not yet visible")

        return (
            self.session.query(Pick)
            .join(Game, Pick.game_id == Game.id)
            .filter(Game.week_id == week_id, Pick.league_id == league_id)
            .order_by(Game.game_time, Game.id, Pick.user_id)
            .all()
        )

    def _is_active_member(self, user_id, league_id):
        return (
            self.session.query(LeagueMembership.id)
            .filter_by(user_id=user_id, league_id=league_id, is_active=True)
            .first()
            is not None
        )
