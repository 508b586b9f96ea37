from datetime import datetime, timezone

from mountaintop import db

OVER_UNDER_CHOICES = ("over", "under")


class Pick(db.Model):
    __tablename__ = "picks"

    id = db.Column(db.Integer, primary_key=True)

    # Pick identification (league is denormalized for leaderboard queries)
    league_id = db.Column(db.Integer, db.ForeignKey("leagues.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    game_id = db.Column(db.Integer, db.ForeignKey("games.id"), nullable=False)

    # Pick details
    picked_team_id = db.Column(db.Integer, db.ForeignKey("teams.id"), nullable=False)
    picked_over_under = db.Column(db.String(10), nullable=False)  # "over" or "under"
    confidence = db.Column(db.Integer)  # Informational only, not scored

    # Results, null until the game is final
    spread_correct = db.Column(db.Boolean)
    over_under_correct = db.Column(db.Boolean)
    points_earned = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    picked_team = db.relationship("Team", foreign_keys=[picked_team_id])

    __table_args__ = (
        db.UniqueConstraint(
            "league_id", "user_id", "game_id", name="unique_league_user_game_pick"
        ),
        db.Index("idx_pick_game", "game_id"),
        db.Index("idx_pick_user", "user_id"),
        db.Index("idx_pick_league", "league_id"),
    )

    def __repr__(self):
        return f"<Pick user_id={self.user_id} game_id={self.game_id} league_id={self.league_id}>"

    def to_dict(self, include_game=False, include_user=False):
        """Convert pick to dictionary for API responses"""
        data = {
            "id": self.id,
            "league_id": self.league_id,
            "user_id": self.user_id,
            "game_id": self.game_id,
            "picked_team_id": self.picked_team_id,
            "picked_over_under": self.picked_over_under,
            "confidence": self.confidence,
            "spread_correct": self.spread_correct,
            "over_under_correct": self.over_under_correct,
            "points_earned": self.points_earned,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_game:
            data["game"] = self.game.to_dict() if self.game else None

        if include_user:
            data["user"] = {
                "id": self.user.id,
                "username": self.user.username,
                "display_name": self.user.full_name,
            }

        return data
