"""Compatibility matching: scoring, hard filters and ranking."""

from gymbuddy.matching.geo import distance_km, is_unset
from gymbuddy.matching.matcher import MatchOptions, ScoredCandidate, suggest_matches
from gymbuddy.matching.profile import MatchLink, MatchProfile, TimeSlot
from gymbuddy.matching.scoring import CompatibilityScore, calculate_compatibility

__all__ = [
    "distance_km",
    "is_unset",
    "MatchOptions",
    "ScoredCandidate",
    "suggest_matches",
    "MatchLink",
    "MatchProfile",
    "TimeSlot",
    "CompatibilityScore",
    "calculate_compatibility",
]
