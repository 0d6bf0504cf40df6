from datetime import datetime
from sqlalchemy import and_, or_

from gymbuddy.extensions import db
from gymbuddy.matching.profile import MatchLink


def pair_key(user_a, user_b):
    """Order-independent key for a pair of users."""
    low, high = sorted((user_a, user_b))
    return f"{low}:{high}"


def _pair_key_default(context):
    params = context.get_current_parameters()
    return pair_key(params["initiator_id"], params["receiver_id"])


class Match(db.Model):
    __tablename__ = "matches"

    id = db.Column(db.Integer, primary_key=True)
    initiator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    # One match per unordered pair, whichever side initiated
    pair_key = db.Column(db.String(41), nullable=False, default=_pair_key_default)
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('pending','accepted','rejected','expired')"),
        default="pending",
        nullable=False,
        index=True,
    )

    # Score and per-factor breakdown at the time the match was created, 0-100
    match_score = db.Column(db.Integer, db.CheckConstraint("match_score BETWEEN 0 AND 100"), default=0)
    fitness_goals = db.Column(db.Integer, default=0)
    workout_preferences = db.Column(db.Integer, default=0)
    fitness_level = db.Column(db.Integer, default=0)
    location_proximity = db.Column(db.Integer, default=0)
    availability_overlap = db.Column(db.Integer, default=0)

    is_active = db.Column(db.Boolean, default=True, index=True)
    matched_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    initiator = db.relationship("User", foreign_keys=[initiator_id], back_populates="initiated_matches")
    receiver = db.relationship("User", foreign_keys=[receiver_id], back_populates="received_matches")
    planned_workouts = db.relationship(
        "PlannedWorkout", back_populates="match", lazy="selectin",
        cascade="all, delete-orphan", order_by="PlannedWorkout.scheduled_for",
    )

    __table_args__ = (
        db.CheckConstraint("initiator_id <> receiver_id", name="ck_matches_distinct_users"),
        db.Index("idx_matches_pair", "initiator_id", "receiver_id"),
        db.UniqueConstraint("pair_key", name="uq_matches_pair_key"),
    )

    @classmethod
    def involving(cls, user_id):
        return cls.query.filter(or_(cls.initiator_id == user_id, cls.receiver_id == user_id))

    @classmethod
    def between(cls, user_a, user_b):
        return cls.query.filter(
            or_(
                and_(cls.initiator_id == user_a, cls.receiver_id == user_b),
                and_(cls.initiator_id == user_b, cls.receiver_id == user_a),
            )
        )

    def has_participant(self, user_id):
        return user_id in (self.initiator_id, self.receiver_id)

    def other_user_id(self, user_id):
        return self.receiver_id if self.initiator_id == user_id else self.initiator_id

    def apply_compatibility(self, compatibility):
        breakdown = compatibility.breakdown
        self.match_score = compatibility.score
        self.fitness_goals = breakdown["fitnessGoals"]
        self.workout_preferences = breakdown["workoutPreferences"]
        self.fitness_level = breakdown["fitnessLevel"]
        self.location_proximity = breakdown["locationProximity"]
        self.availability_overlap = breakdown["availabilityOverlap"]

    @property
    def compatibility_factors(self):
        return {
            "fitnessGoals": self.fitness_goals,
            "workoutPreferences": self.workout_preferences,
            "fitnessLevel": self.fitness_level,
            "locationProximity": self.location_proximity,
            "availabilityOverlap": self.availability_overlap,
        }

    def to_link(self):
        return MatchLink(initiator_id=self.initiator_id, receiver_id=self.receiver_id, status=self.status)
