from .user import User
from .availability_slot import AvailabilitySlot
from .match import Match
from .planned_workout import PlannedWorkout

__all__ = [
    "User",
    "AvailabilitySlot",
    "Match",
    "PlannedWorkout",
]
