"""Store-backed entry point of the matcher."""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from flask import current_app, has_app_context

from gymbuddy.errors import NotFound
from gymbuddy.matching.matcher import MatchOptions, ensure_complete, suggest_matches
from gymbuddy.matching.stores import MatchStore, ProfileStore

logger = logging.getLogger(__name__)


def _in_app_context(app, func):
    """Wrap func so it runs inside its own app context on a worker thread."""
    if app is None:
        return func

    def wrapper(*args, **kwargs):
        with app.app_context():
            return func(*args, **kwargs)

    return wrapper


class MatchFinder:
    """Loads a requester, its candidate pool and its existing matches, then ranks.

    The candidate and match reads do not depend on each other, so with
    parallel_fetch they run on two worker threads. Any failed read fails the
    whole call.
    """

    def __init__(self, profile_store, match_store, parallel_fetch=True,
                 default_age_min=18, default_age_max=100):
        self.profile_store = profile_store
        self.match_store = match_store
        self.parallel_fetch = parallel_fetch
        self.default_age_min = default_age_min
        self.default_age_max = default_age_max

    @classmethod
    def from_config(cls, config, profile_store=None, match_store=None):
        return cls(
            profile_store or ProfileStore(),
            match_store or MatchStore(),
            parallel_fetch=config.get("MATCH_PARALLEL_FETCH", True),
            default_age_min=config.get("MATCH_DEFAULT_AGE_MIN", 18),
            default_age_max=config.get("MATCH_DEFAULT_AGE_MAX", 100),
        )

    def load_requester(self, requester_id):
        requester = self.profile_store.find_by_id(requester_id)
        if requester is None:
            raise NotFound("User not found")
        return requester

    def _fetch(self, requester, options, user_type):
        fetch_candidates = partial(
            self.profile_store.find_candidates,
            requester,
            options.max_distance_km,
            user_type,
            options.default_age_min,
            options.default_age_max,
        )
        fetch_matches = partial(self.match_store.find_involving, requester.id)

        if not self.parallel_fetch:
            return fetch_candidates(), fetch_matches()

        app = current_app._get_current_object() if has_app_context() else None
        with ThreadPoolExecutor(max_workers=2) as executor:
            candidates_future = executor.submit(_in_app_context(app, fetch_candidates))
            matches_future = executor.submit(_in_app_context(app, fetch_matches))
            # .result() re-raises the worker's exception
            return candidates_future.result(), matches_future.result()

    def find_potential_matches(self, requester_id, max_distance_km=20, limit=10,
                               min_score=0, user_type="user"):
        """Rank candidates for requester_id.

        Returns:
            List of ScoredCandidate, best first

        Raises:
            NotFound: requester does not exist
            PreconditionFailed: requester profile is incomplete
            InvalidArgument: options are out of range
            Unavailable: a store read failed
        """
        requester = self.load_requester(requester_id)
        return self.rank_for(
            requester,
            max_distance_km=max_distance_km,
            limit=limit,
            min_score=min_score,
            user_type=user_type,
        )

    def rank_for(self, requester, max_distance_km=20, limit=10, min_score=0, user_type="user"):
        """Rank candidates for an already loaded requester profile."""
        ensure_complete(requester)
        options = MatchOptions(
            max_distance_km=max_distance_km,
            limit=limit,
            min_score=min_score,
            default_age_min=self.default_age_min,
            default_age_max=self.default_age_max,
        ).validate()

        candidates, matches = self._fetch(requester, options, user_type)
        logger.debug(
            "Fetched %d candidates and %d existing matches for profile %s",
            len(candidates), len(matches), requester.id,
        )
        return suggest_matches(requester, candidates, matches, options)


def find_potential_matches(requester_id, max_distance=None, limit=None, min_score=None,
                           user_type="user", finder=None):
    """Internal utility form: [{user, compatibilityScore, compatibilityDetails}].

    Defaults come from the current app config.
    """
    config = current_app.config
    finder = finder or MatchFinder.from_config(config)
    ranked = finder.find_potential_matches(
        requester_id,
        max_distance_km=max_distance if max_distance is not None else config["MATCH_DEFAULT_DISTANCE_KM"],
        limit=limit if limit is not None else config["MATCH_DEFAULT_LIMIT"],
        min_score=min_score if min_score is not None else config["MATCH_MIN_SCORE"],
        user_type=user_type,
    )
    return [item.as_potential_match() for item in ranked]
