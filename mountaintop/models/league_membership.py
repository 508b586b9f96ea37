from datetime import datetime, timezone

from mountaintop import db


class LeagueMembership(db.Model):
    __tablename__ = "league_memberships"

    id = db.Column(db.Integer, primary_key=True)
    league_id = db.Column(db.Integer, db.ForeignKey("leagues.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    role = db.Column(db.String(20), default="member")  # "owner" or "member"
    is_active = db.Column(db.Boolean, default=True)

    joined_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    left_at = db.Column(db.DateTime)

    __table_args__ = (
        db.UniqueConstraint("league_id", "user_id", name="unique_league_user"),
        db.Index("idx_league_members_active", "league_id", "is_active"),
    )

    def __repr__(self):
        return f"<LeagueMembership user_id={self.user_id} league_id={self.league_id}>"

    def reactivate(self):
        self.is_active = True
        self.left_at = None
        self.joined_at = datetime.now(timezone.utc)
