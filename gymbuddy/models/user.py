from datetime import datetime
from sqlalchemy import and_, or_
from sqlalchemy.dialects.postgresql import JSONB

from gymbuddy.extensions import db
from gymbuddy.matching.geo import as_point, crosses_antimeridian, is_unset
from gymbuddy.matching.profile import MatchProfile

USERS_TABLE = "users"

# JSON list column, JSONB on Postgres
TagList = db.JSON().with_variant(JSONB(), "postgresql")

FITNESS_GOALS = (
    "weight_loss", "muscle_gain", "endurance", "strength",
    "flexibility", "toning", "general_fitness",
)
WORKOUT_TYPES = (
    "cardio", "weight_lifting", "yoga", "pilates", "crossfit", "functional",
    "hiit", "swimming", "running", "cycling", "other",
)
FITNESS_LEVELS = ("beginner", "intermediate", "advanced", "professional")
GENDERS = ("male", "female", "other", "prefer_not_to_say")
PREFERRED_GENDERS = ("male", "female", "any")


class User(db.Model):
    __tablename__ = USERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    user_type = db.Column(
        db.String(20),
        db.CheckConstraint("user_type IN ('user','instructor')"),
        default="user",
        nullable=False,
        index=True,
    )
    profile_image = db.Column(db.String(255), nullable=True)
    bio = db.Column(db.Text, default="")

    age = db.Column(db.Integer, nullable=True)
    gender = db.Column(
        db.String(20),
        db.CheckConstraint("gender IN ('male','female','other','prefer_not_to_say')"),
        default="prefer_not_to_say",
    )

    # Location as a (longitude, latitude) point
    longitude = db.Column(db.Float, nullable=True)
    latitude = db.Column(db.Float, nullable=True)
    address = db.Column(db.String(255), default="")

    fitness_level = db.Column(
        db.String(20),
        db.CheckConstraint("fitness_level IN ('beginner','intermediate','advanced','professional')"),
        default="beginner",
    )
    fitness_goals = db.Column(TagList, default=list)
    preferred_workouts = db.Column(TagList, default=list)

    # Matching preferences
    preferred_gender = db.Column(
        db.String(10),
        db.CheckConstraint("preferred_gender IN ('male','female','any')"),
        default="any",
    )
    preferred_age_min = db.Column(db.Integer, default=18)
    preferred_age_max = db.Column(db.Integer, default=100)

    is_profile_complete = db.Column(db.Boolean, default=False, index=True)
    is_active = db.Column(db.Boolean, default=True, index=True)
    account_status = db.Column(
        db.String(20),
        db.CheckConstraint("account_status IN ('pending','active','suspended','deleted')"),
        default="pending",
        index=True,
    )

    deactivated_at = db.Column(db.DateTime, nullable=True)
    last_active = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    availability = db.relationship(
        "AvailabilitySlot",
        back_populates="user",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="AvailabilitySlot.id",
    )
    initiated_matches = db.relationship(
        "Match", foreign_keys="[Match.initiator_id]", back_populates="initiator",
        lazy="dynamic", cascade="all, delete-orphan",
    )
    received_matches = db.relationship(
        "Match", foreign_keys="[Match.receiver_id]", back_populates="receiver",
        lazy="dynamic", cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.Index("idx_users_location", "latitude", "longitude"),
        db.Index("idx_users_matchable", "is_profile_complete", "is_active", "account_status"),
    )

    @classmethod
    def within_box(cls, box):
        """SQL predicate for users located inside a bounding_box()."""
        min_lon, min_lat, max_lon, max_lat = box
        if crosses_antimeridian(box):
            longitude = or_(cls.longitude >= min_lon, cls.longitude <= max_lon)
        else:
            longitude = cls.longitude.between(min_lon, max_lon)
        return and_(longitude, cls.latitude.between(min_lat, max_lat))

    # ------- helper properties -------
    @property
    def location(self):
        """(longitude, latitude) or None when unset."""
        point = as_point((self.longitude, self.latitude))
        if is_unset(point):
            return None
        return point

    @location.setter
    def location(self, point):
        if point is None:
            self.longitude = None
            self.latitude = None
        else:
            self.longitude, self.latitude = point

    @property
    def is_matchable(self):
        return bool(self.is_profile_complete and self.is_active and self.account_status == "active")

    def refresh_profile_completeness(self):
        self.is_profile_complete = bool(
            self.name
            and self.age
            and self.gender
            and self.fitness_level
            and self.location is not None
            and self.fitness_goals
            and self.preferred_workouts
        )
        return self.is_profile_complete

    def to_match_profile(self, public=None):
        return MatchProfile(
            id=self.id,
            location=self.location,
            fitness_level=self.fitness_level,
            fitness_goals=frozenset(self.fitness_goals or ()),
            preferred_workouts=frozenset(self.preferred_workouts or ()),
            availability=tuple(slot.to_time_slot() for slot in self.availability),
            gender=self.gender,
            age=self.age,
            preferred_gender=self.preferred_gender,
            preferred_age_min=self.preferred_age_min,
            preferred_age_max=self.preferred_age_max,
            user_type=self.user_type,
            is_active=bool(self.is_active),
            account_status=self.account_status,
            is_profile_complete=bool(self.is_profile_complete),
            public=public or {},
        )
