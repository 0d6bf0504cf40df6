from datetime import datetime

from gymbuddy.extensions import db

PLANNED_WORKOUT_STATUSES = ("proposed", "confirmed", "completed", "cancelled")


class PlannedWorkout(db.Model):
    """A workout two matched users agreed to do together."""
    __tablename__ = "planned_workouts"

    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    proposer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    scheduled_for = db.Column(db.DateTime, nullable=False)
    workout_type = db.Column(db.String(30), nullable=True)
    location = db.Column(db.String(255), default="")
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('proposed','confirmed','completed','cancelled')"),
        default="proposed",
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    match = db.relationship("Match", back_populates="planned_workouts")
    proposer = db.relationship("User")
