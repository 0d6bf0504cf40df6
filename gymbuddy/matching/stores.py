"""SQLAlchemy-backed profile and match stores used by the matcher.

Stores return plain MatchProfile / MatchLink values so results can cross
thread and session boundaries.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from gymbuddy.errors import Unavailable
from gymbuddy.extensions import db
from gymbuddy.matching.geo import bounding_box, is_unset
from gymbuddy.models import Match, User
from gymbuddy.schemas import PublicProfileSchema

logger = logging.getLogger(__name__)

public_profile_schema = PublicProfileSchema()


def to_match_profile(user):
    return user.to_match_profile(public=public_profile_schema.dump(user))


class ProfileStore:
    """Reads profiles for matching."""

    def find_by_id(self, user_id):
        try:
            user = db.session.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error loading profile {user_id}: {e}")
            raise Unavailable("Could not load profile") from e
        return to_match_profile(user) if user else None

    def find_candidates(self, requester, max_distance_km, user_type="user",
                        default_age_min=18, default_age_max=100):
        """Pre-filter candidates in SQL.

        Equality, membership and range predicates run in the database; the
        radius is approximated by a bounding box and the exact haversine check
        happens in the hard filters.
        """
        query = User.query.filter(
            User.id != requester.id,
            User.user_type == user_type,
            User.is_profile_complete.is_(True),
            User.is_active.is_(True),
            User.account_status == "active",
            User.age.between(
                requester.preferred_age_min or default_age_min,
                requester.preferred_age_max or default_age_max,
            ),
        )
        if requester.preferred_gender and requester.preferred_gender != "any":
            query = query.filter(User.gender == requester.preferred_gender)
        if not is_unset(requester.location):
            query = query.filter(User.within_box(bounding_box(requester.location, max_distance_km)))

        try:
            users = query.order_by(User.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading candidates for profile {requester.id}: {e}")
            raise Unavailable("Could not load candidate profiles") from e
        return [to_match_profile(user) for user in users]


class MatchStore:
    """Reads existing matches to build the exclusion set."""

    def find_involving(self, user_id):
        try:
            matches = Match.involving(user_id).all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading matches for profile {user_id}: {e}")
            raise Unavailable("Could not load existing matches") from e
        return [match.to_link() for match in matches]
