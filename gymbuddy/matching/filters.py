"""Hard eligibility filters applied before any candidate is scored."""

import logging
from typing import Iterable, List, Set

from gymbuddy.matching.geo import distance_km, is_unset
from gymbuddy.matching.profile import MatchProfile

logger = logging.getLogger(__name__)

DEFAULT_AGE_MIN = 18
DEFAULT_AGE_MAX = 100


def build_exclusion_set(requester_id: int, matches: Iterable) -> Set[int]:
    """Ids on the other side of every match involving requester_id.

    Status is ignored: pending, accepted, rejected and expired matches all
    exclude the pair from future suggestions.
    """
    excluded = set()
    for match in matches:
        if match.initiator_id == requester_id:
            excluded.add(match.receiver_id)
        elif match.receiver_id == requester_id:
            excluded.add(match.initiator_id)
    return excluded


def is_other_profile(requester: MatchProfile, candidate: MatchProfile) -> bool:
    return candidate.id != requester.id


def is_matchable(candidate: MatchProfile) -> bool:
    return candidate.is_matchable


def matches_gender_preference(requester: MatchProfile, candidate: MatchProfile) -> bool:
    preferred = requester.preferred_gender
    if not preferred or preferred == "any":
        return True
    return candidate.gender == preferred


def within_age_range(requester: MatchProfile, candidate: MatchProfile,
                     default_min: int = DEFAULT_AGE_MIN,
                     default_max: int = DEFAULT_AGE_MAX) -> bool:
    if candidate.age is None:
        return False
    age_min = requester.preferred_age_min or default_min
    age_max = requester.preferred_age_max or default_max
    return age_min <= candidate.age <= age_max


def within_distance(requester: MatchProfile, candidate: MatchProfile, max_distance_km: float) -> bool:
    # No requester location means no distance filter at all
    if is_unset(requester.location):
        return True
    if is_unset(candidate.location):
        return False
    return distance_km(requester.location, candidate.location) <= max_distance_km


def passes_hard_filters(requester: MatchProfile, candidate: MatchProfile,
                        excluded_ids: Set[int], max_distance_km: float,
                        default_age_min: int = DEFAULT_AGE_MIN,
                        default_age_max: int = DEFAULT_AGE_MAX) -> bool:
    return (
        is_other_profile(requester, candidate)
        and candidate.id not in excluded_ids
        and is_matchable(candidate)
        and matches_gender_preference(requester, candidate)
        and within_age_range(requester, candidate, default_age_min, default_age_max)
        and within_distance(requester, candidate, max_distance_km)
    )


def apply_hard_filters(requester: MatchProfile, candidates: Iterable[MatchProfile],
                       excluded_ids: Set[int], max_distance_km: float,
                       default_age_min: int = DEFAULT_AGE_MIN,
                       default_age_max: int = DEFAULT_AGE_MAX) -> List[MatchProfile]:
    """Keep only candidates that pass every hard filter."""
    candidates = list(candidates)
    eligible = [
        candidate for candidate in candidates
        if passes_hard_filters(
            requester, candidate, excluded_ids, max_distance_km,
            default_age_min, default_age_max,
        )
    ]
    logger.debug(
        "Hard filters for profile %s kept %d of %d candidates",
        requester.id, len(eligible), len(candidates),
    )
    return eligible
