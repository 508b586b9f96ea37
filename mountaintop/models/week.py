from datetime import datetime, timezone

from mountaintop import db

WEEK_STATUSES = ("creating", "picking", "scoring", "finished")


class Week(db.Model):
    __tablename__ = "weeks"

    id = db.Column(db.Integer, primary_key=True)
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    week_number = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(50))  # e.g., "Week 8"

    # creating -> picking -> scoring -> finished
    status = db.Column(db.String(20), default="creating", nullable=False)
    pick_deadline = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    games = db.relationship(
        "Game", backref="week", lazy="dynamic", order_by="Game.game_time"
    )

    __table_args__ = (
        db.UniqueConstraint("season_id", "week_number", name="unique_season_week"),
    )

    def __repr__(self):
        return f"<Week {self.week_number} season_id={self.season_id}>"

    @property
    def display_name(self):
        return self.name or f"Week {self.week_number}"

    def deadline_passed(self):
        """Check if the pick deadline (if any) has passed"""
        if self.pick_deadline is None:
            return False
        deadline = self.pick_deadline
        # Naive datetimes are stored as UTC
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= deadline

    def is_open_for_picks(self):
        return self.status == "picking" and not self.deadline_passed()

    def to_dict(self):
        return {
            "id": self.id,
            "season_id": self.season_id,
            "week_number": self.week_number,
            "name": self.display_name,
            "status": self.status,
            "pick_deadline": (
                self.pick_deadline.isoformat() if self.pick_deadline else None
            ),
        }
