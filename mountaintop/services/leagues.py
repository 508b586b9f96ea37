"""
League membership service

Joining a league by its XXXX-XXXX code and listing a user's leagues.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from mountaintop.errors import NotFoundError, PersistenceError, ValidationError
from mountaintop.models import League

logger = logging.getLogger(__name__)


class LeagueService:
    def __init__(self, session):
        self.session = session

    def join(self, user, code):
        """
        Add ``user`` to the league with join code ``code``.

        A previously left membership is reactivated rather than duplicated.

        Raises:
            NotFoundError: no league has that code
            ValidationError: league inactive, or user already a member
        """
        code = code.strip().upper()
        league = self.session.query(League).filter_by(code=code).first()
        if league is None:
            raise NotFoundError("League not found with that code", {"code": code})
        if not league.is_active:
            raise ValidationError("This league is no longer active")

        joined, message = league.add_member(user)
        if not joined:
            raise ValidationError("You are already a member of this league")

        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error adding user {user.id} to league {league.id}: {e}")
            raise PersistenceError("Failed to join league") from e

        logger.info(f"User {user.username} joined league {league.name}: {message}")
        return league

    def list_for_user(self, user):
        return sorted(user.get_leagues(), key=lambda league: league.name.lower())
