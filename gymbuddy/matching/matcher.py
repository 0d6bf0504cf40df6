"""Ranking of candidate profiles for a requester.

`suggest_matches` is a pure function of (requester, candidate pool, existing
matches, options): it performs no I/O and never mutates its inputs.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from gymbuddy.errors import InvalidArgument, PreconditionFailed
from gymbuddy.matching.filters import (
    DEFAULT_AGE_MAX,
    DEFAULT_AGE_MIN,
    apply_hard_filters,
    build_exclusion_set,
)
from gymbuddy.matching.profile import MatchLink, MatchProfile
from gymbuddy.matching.scoring import CompatibilityScore, calculate_compatibility

logger = logging.getLogger(__name__)

INCOMPLETE_PROFILE_MESSAGE = "Please complete your profile before getting match suggestions"


@dataclass
class MatchOptions:
    """Knobs for one suggestion request."""
    max_distance_km: float = 20
    limit: int = 10
    min_score: int = 0
    default_age_min: int = DEFAULT_AGE_MIN
    default_age_max: int = DEFAULT_AGE_MAX

    def validate(self) -> "MatchOptions":
        errors = {}
        if (
            isinstance(self.max_distance_km, bool)
            or not isinstance(self.max_distance_km, (int, float))
            or not math.isfinite(self.max_distance_km)
            or self.max_distance_km <= 0
        ):
            errors["distance"] = ["Must be a positive number of kilometres."]
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            errors["limit"] = ["Must be a positive integer."]
        if (
            isinstance(self.min_score, bool)
            or not isinstance(self.min_score, (int, float))
            or not 0 <= self.min_score <= 100
        ):
            errors["min_score"] = ["Must be between 0 and 100."]
        if errors:
            raise InvalidArgument("Invalid match options", errors=errors)
        return self


@dataclass
class ScoredCandidate:
    profile: MatchProfile
    compatibility: CompatibilityScore

    @property
    def score(self) -> int:
        return self.compatibility.score

    def as_suggestion(self) -> Dict[str, Any]:
        """Shape used by GET /api/matches/suggestions."""
        return {
            "user": self.profile.public,
            "matchScore": self.score,
            "compatibilityFactors": self.compatibility.breakdown,
        }

    def as_potential_match(self) -> Dict[str, Any]:
        """Shape used by the internal find_potential_matches form."""
        return {
            "user": self.profile.public,
            "compatibilityScore": self.score,
            "compatibilityDetails": self.compatibility.breakdown,
        }


def ensure_complete(requester: MatchProfile) -> None:
    if not requester.is_profile_complete:
        raise PreconditionFailed(INCOMPLETE_PROFILE_MESSAGE)


def rank_candidates(requester: MatchProfile, candidates: Iterable[MatchProfile],
                    options: MatchOptions) -> List[ScoredCandidate]:
    """Score, threshold, sort and truncate an already filtered pool.

    Equal scores are ordered by candidate id so results are reproducible.
    """
    scored = [
        ScoredCandidate(candidate, calculate_compatibility(requester, candidate))
        for candidate in candidates
    ]
    scored = [item for item in scored if item.score >= options.min_score]
    scored.sort(key=lambda item: (-item.score, item.profile.id))
    return scored[:options.limit]


def suggest_matches(requester: MatchProfile, candidates: Iterable[MatchProfile],
                    existing_matches: Iterable[MatchLink],
                    options: MatchOptions) -> List[ScoredCandidate]:
    """Rank candidates for requester.

    Args:
        requester: Profile asking for suggestions; must be complete
        candidates: Candidate pool, possibly pre-filtered by the store
        existing_matches: Matches involving the requester, any status
        options: Distance, limit and score threshold

    Returns:
        At most options.limit candidates with score >= options.min_score,
        best first

    Raises:
        PreconditionFailed: requester profile is incomplete
        InvalidArgument: options are out of range
    """
    ensure_complete(requester)
    options.validate()

    excluded_ids = build_exclusion_set(requester.id, existing_matches)
    eligible = apply_hard_filters(
        requester,
        candidates,
        excluded_ids,
        options.max_distance_km,
        options.default_age_min,
        options.default_age_max,
    )
    ranked = rank_candidates(requester, eligible, options)
    logger.info(
        "Suggested %d of %d eligible candidates for profile %s",
        len(ranked), len(eligible), requester.id,
    )
    return ranked
