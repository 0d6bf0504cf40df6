from gymbuddy.extensions import db
from gymbuddy.matching.profile import TimeSlot

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class AvailabilitySlot(db.Model):
    __tablename__ = "availability_slots"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    day = db.Column(
        db.String(10),
        db.CheckConstraint("day IN ('monday','tuesday','wednesday','thursday','friday','saturday','sunday')"),
        nullable=False,
    )
    start_time = db.Column(db.String(5), nullable=False)  # "HH:MM"
    end_time = db.Column(db.String(5), nullable=False)  # "HH:MM"

    user = db.relationship("User", back_populates="availability")

    __table_args__ = (
        db.Index("idx_availability_user_day", "user_id", "day"),
    )

    def to_time_slot(self):
        return TimeSlot(day=self.day, start_time=self.start_time, end_time=self.end_time)
