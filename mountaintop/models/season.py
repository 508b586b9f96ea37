from datetime import datetime, timezone

from mountaintop import db


class Season(db.Model):
    __tablename__ = "seasons"

    id = db.Column(db.Integer, primary_key=True)
    league_id = db.Column(db.Integer, db.ForeignKey("leagues.id"), nullable=True)
    year = db.Column(db.Integer, nullable=False, index=True)
    name = db.Column(db.String(50))  # e.g., "2024 Regular Season"
    is_active = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    weeks = db.relationship(
        "Week",
        backref="season",
        lazy="dynamic",
        cascade="all, delete-orphan",
        order_by="Week.week_number",
    )

    __table_args__ = (db.Index("idx_season_active", "is_active"),)

    def __repr__(self):
        return f"<Season {self.year}>"

    @staticmethod
    def get_current_season():
        """Get the currently active season"""
        return Season.query.filter_by(is_active=True).first()

    def get_current_week(self):
        """
        The earliest week still in play (picking or scoring), or the latest
        week once every week is finished or still being set up
        """
        from .week import Week

        in_play = self.weeks.filter(Week.status.in_(("picking", "scoring"))).first()
        if in_play is not None:
            return in_play
        return self.weeks.order_by(None).order_by(Week.week_number.desc()).first()

    def to_dict(self):
        return {
            "id": self.id,
            "league_id": self.league_id,
            "year": self.year,
            "name": self.name,
            "is_active": self.is_active,
        }
