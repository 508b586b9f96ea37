import secrets
import string
from datetime import datetime, timezone

from mountaintop import db

CODE_ALPHABET = string.ascii_uppercase + string.digits


class League(db.Model):
    __tablename__ = "leagues"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)

    # Join code, e.g. "CFB7-XY2K"
    code = db.Column(db.String(16), unique=True, nullable=False, index=True)

    is_public = db.Column(db.Boolean, default=False)
    is_active = db.Column(db.Boolean, default=True)

    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    members = db.relationship(
        "LeagueMembership",
        backref="league",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )
    picks = db.relationship("Pick", backref="league", lazy="dynamic")
    seasons = db.relationship("Season", backref="league", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_league_owner", "owner_id"),
        db.Index("idx_league_active", "is_active"),
    )

    def __repr__(self):
        return f"<League {self.name}>"

    def __init__(self, **kwargs):
        super(League, self).__init__(**kwargs)
        if not self.code:
            self.code = self.generate_code()

    @staticmethod
    def generate_code():
        """Generate a unique join code in XXXX-XXXX form"""
        while True:
            raw = "".join(secrets.choice(CODE_ALPHABET) for _ in range(8))
            code = f"{raw[:4]}-{raw[4:]}"
            if not League.query.filter_by(code=code).first():
                return code

    def get_member_count(self):
        return self.members.filter_by(is_active=True).count()

    def is_user_member(self, user_id):
        """Check if user is an active member"""
        return (
            self.members.filter_by(user_id=user_id, is_active=True).first() is not None
        )

    def add_member(self, user, role="member"):
        """Add a user to the league, reactivating a previous membership"""
        from .league_membership import LeagueMembership

        existing = self.members.filter_by(user_id=user.id).first()
        if existing:
            if existing.is_active:
                return False, "User is already a member"
            existing.reactivate()
            return True, "Membership reactivated"

        membership = LeagueMembership(user_id=user.id, league_id=self.id, role=role)
        db.session.add(membership)
        return True, "User added successfully"

    def to_dict(self):
        """Convert league to dictionary for API responses"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "code": self.code,
            "is_public": self.is_public,
            "is_active": self.is_active,
            "owner_id": self.owner_id,
            "member_count": self.get_member_count(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
