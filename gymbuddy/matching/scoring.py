"""Compatibility scoring between two profiles.

Five independent factors, each normalized to [0, 1], are combined with fixed
weights into an integer score in [0, 100].
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from gymbuddy.matching.geo import distance_km, is_unset
from gymbuddy.matching.profile import MatchProfile, TimeSlot

FITNESS_LEVELS = ("beginner", "intermediate", "advanced", "professional")

# Factor name -> weight. Weights sum to 100.
WEIGHTS: Dict[str, int] = {
    "fitness_goals": 30,
    "workout_preferences": 25,
    "fitness_level": 15,
    "location_proximity": 20,
    "availability_overlap": 10,
}

# Display names used in API payloads and stored on Match rows
FACTOR_KEYS: Dict[str, str] = {
    "fitness_goals": "fitnessGoals",
    "workout_preferences": "workoutPreferences",
    "fitness_level": "fitnessLevel",
    "location_proximity": "locationProximity",
    "availability_overlap": "availabilityOverlap",
}

# (max distance in km, sub-score), checked in order
PROXIMITY_BUCKETS: Tuple[Tuple[float, float], ...] = (
    (1, 1.0),
    (5, 0.8),
    (10, 0.6),
    (20, 0.4),
    (50, 0.2),
)

NEUTRAL_LEVEL_SCORE = 0.5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class CompatibilityScore:
    """Overall score plus the per-factor sub-scores it was built from."""
    score: int
    factors: Dict[str, float] = field(default_factory=dict)

    @property
    def breakdown(self) -> Dict[str, int]:
        """Sub-scores scaled to 0-100 for display."""
        return {
            FACTOR_KEYS[name]: round_half_up(value * 100)
            for name, value in self.factors.items()
        }


def jaccard_index(tags_a: Iterable[str], tags_b: Iterable[str]) -> float:
    """Size of the intersection over size of the union; 0 if either is empty."""
    set_a = set(tags_a or ())
    set_b = set(tags_b or ())
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def level_compatibility(level_a: Optional[str], level_b: Optional[str]) -> float:
    if level_a not in FITNESS_LEVELS or level_b not in FITNESS_LEVELS:
        return NEUTRAL_LEVEL_SCORE
    difference = abs(FITNESS_LEVELS.index(level_a) - FITNESS_LEVELS.index(level_b))
    return 1 - difference / (len(FITNESS_LEVELS) - 1)


def proximity_score(distance: float) -> float:
    for limit, score in PROXIMITY_BUCKETS:
        if distance <= limit:
            return score
    return 0.0


def location_proximity(point_a, point_b) -> float:
    if is_unset(point_a) or is_unset(point_b):
        return 0.0
    return proximity_score(distance_km(point_a, point_b))


def to_minutes(clock: str) -> Optional[int]:
    """Convert "HH:MM" to minutes since midnight, None when malformed."""
    try:
        hours, minutes = (int(part) for part in clock.split(":"))
    except (AttributeError, TypeError, ValueError):
        return None
    if not (0 <= hours <= 23 and 0 <= minutes < 60):
        return None if (hours, minutes) != (24, 0) else 24 * 60
    return hours * 60 + minutes


def _slots_by_day(slots: Iterable[TimeSlot]) -> Dict[str, List[Tuple[int, int]]]:
    by_day: Dict[str, List[Tuple[int, int]]] = defaultdict(list)
    for slot in slots:
        start = to_minutes(slot.start_time)
        end = to_minutes(slot.end_time)
        if start is None or end is None:
            continue
        by_day[slot.day].append((start, end))
    return by_day


def availability_overlap(slots_a: Iterable[TimeSlot], slots_b: Iterable[TimeSlot]) -> float:
    """Share of days on which the two weekly schedules overlap.

    Counts days with at least one overlapping pair of slots and normalizes by
    the mean number of slots on both sides.
    """
    slots_a = list(slots_a or ())
    slots_b = list(slots_b or ())
    if not slots_a or not slots_b:
        return 0.0

    days_a = _slots_by_day(slots_a)
    days_b = _slots_by_day(slots_b)

    overlap_count = 0
    for day, windows in days_b.items():
        if any(
            start_b < end_a and start_a < end_b
            for start_b, end_b in windows
            for start_a, end_a in days_a.get(day, ())
        ):
            overlap_count += 1

    normalizer = (len(slots_a) + len(slots_b)) / 2
    return min(1.0, overlap_count / normalizer)


def calculate_compatibility(requester: MatchProfile, candidate: MatchProfile) -> CompatibilityScore:
    """Score how well candidate fits requester.

    Args:
        requester: Profile asking for suggestions
        candidate: Profile being scored

    Returns:
        CompatibilityScore with the weighted total and each factor in [0, 1]
    """
    factors = {
        "fitness_goals": jaccard_index(requester.fitness_goals, candidate.fitness_goals),
        "workout_preferences": jaccard_index(
            requester.preferred_workouts, candidate.preferred_workouts
        ),
        "fitness_level": level_compatibility(requester.fitness_level, candidate.fitness_level),
        "location_proximity": location_proximity(requester.location, candidate.location),
        "availability_overlap": availability_overlap(
            requester.availability, candidate.availability
        ),
    }

    total = sum(WEIGHTS[name] * value for name, value in factors.items())
    score = max(0, min(100, round_half_up(total)))
    return CompatibilityScore(score=score, factors=factors)
