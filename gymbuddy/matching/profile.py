"""Plain value types the matcher works on.

Profiles are copied out of the ORM before matching so the scoring pass never
touches a database session.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple

Point = Tuple[float, float]  # (longitude, latitude)


@dataclass(frozen=True)
class TimeSlot:
    """A weekly availability window, times as "HH:MM"."""
    day: str
    start_time: str
    end_time: str


@dataclass
class MatchProfile:
    """The subset of a profile the matcher reads."""
    id: int
    location: Optional[Point] = None
    fitness_level: Optional[str] = None
    fitness_goals: FrozenSet[str] = frozenset()
    preferred_workouts: FrozenSet[str] = frozenset()
    availability: Tuple[TimeSlot, ...] = ()
    gender: Optional[str] = None
    age: Optional[int] = None
    preferred_gender: Optional[str] = "any"
    preferred_age_min: Optional[int] = None
    preferred_age_max: Optional[int] = None
    user_type: str = "user"
    is_active: bool = True
    account_status: str = "active"
    is_profile_complete: bool = False
    # Public-safe projection returned to clients
    public: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_matchable(self) -> bool:
        return (
            self.is_profile_complete
            and self.is_active
            and self.account_status == "active"
        )


@dataclass(frozen=True)
class MatchLink:
    """An existing match between two profiles, in either direction."""
    initiator_id: int
    receiver_id: int
    status: str = "pending"
