from datetime import datetime, timezone

from mountaintop import db


class Game(db.Model):
    __tablename__ = "games"

    id = db.Column(db.Integer, primary_key=True)
    week_id = db.Column(db.Integer, db.ForeignKey("weeks.id"), nullable=False)

    # Teams
    home_team_id = db.Column(db.Integer, db.ForeignKey("teams.id"), nullable=False)
    away_team_id = db.Column(db.Integer, db.ForeignKey("teams.id"), nullable=False)

    game_time = db.Column(db.DateTime, nullable=False)

    # Lines
    home_spread = db.Column(db.Float, default=0.0)  # Negative = home team favored
    total = db.Column(db.Float, nullable=False)  # Over/under line for combined score

    # Results, null until the game is final
    is_final = db.Column(db.Boolean, default=False, nullable=False)
    home_score = db.Column(db.Integer)
    away_score = db.Column(db.Integer)
    winner_team_id = db.Column(db.Integer, db.ForeignKey("teams.id"))  # null on tie

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    winner_team = db.relationship("Team", foreign_keys=[winner_team_id])
    picks = db.relationship("Pick", backref="game", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_game_week", "week_id"),
        db.Index("idx_game_time", "game_time"),
        db.CheckConstraint("home_team_id != away_team_id", name="different_teams"),
    )

    def __repr__(self):
        return f"<Game {self.away_team_id} @ {self.home_team_id} week_id={self.week_id}>"

    @property
    def is_tie(self):
        return (
            self.is_final
            and self.home_score is not None
            and self.home_score == self.away_score
        )

    @property
    def status(self):
        if self.is_final:
            return "completed"
        if self.has_started():
            return "in_progress"
        return "scheduled"

    def has_started(self):
        """Check if game has started"""
        if not self.game_time:
            return False
        game_time = self.game_time
        # If game_time is timezone-naive, assume it's in UTC
        if game_time.tzinfo is None:
            game_time = game_time.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= game_time

    def is_pickable(self):
        """Check if game is available for picks (hasn't started yet)"""
        return not self.has_started() and not self.is_final

    def involves_team(self, team_id):
        return team_id in (self.home_team_id, self.away_team_id)

    def apply_result(self, home_score, away_score, is_final):
        """
        Record a result on this game.

        The winner is set only for a final, non-tied result and is cleared
        otherwise; ties never default to either team.
        """
        self.home_score = home_score
        self.away_score = away_score
        self.is_final = bool(is_final)

        if not self.is_final or home_score is None or away_score is None:
            self.winner_team_id = None
        elif home_score > away_score:
            self.winner_team_id = self.home_team_id
        elif away_score > home_score:
            self.winner_team_id = self.away_team_id
        else:
            self.winner_team_id = None

    def to_dict(self, include_relationships=True):
        """Convert game to dictionary for API responses"""
        data = {
            "id": self.id,
            "week_id": self.week_id,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "game_time": self.game_time.isoformat() if self.game_time else None,
            "home_spread": self.home_spread,
            "total": self.total,
            "is_final": self.is_final,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "winner_team_id": self.winner_team_id,
            "status": self.status,
        }

        if include_relationships:
            data["home_team"] = self.home_team.to_dict() if self.home_team else None
            data["away_team"] = self.away_team.to_dict() if self.away_team else None
            data["week"] = self.week.to_dict() if self.week else None

        return data
