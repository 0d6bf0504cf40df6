from marshmallow import ValidationError

from gymbuddy.errors import InvalidArgument

from .profile import (
    AvailabilitySlotSchema,
    BriefUserSchema,
    ProfileSchema,
    ProfileUpdateSchema,
    PublicProfileSchema,
)
from .match import (
    MatchCreateSchema,
    MatchRespondSchema,
    MatchSchema,
    PlannedWorkoutCreateSchema,
    PlannedWorkoutSchema,
    PlannedWorkoutUpdateSchema,
)
from .query import NearbyQuerySchema, SuggestionQuerySchema


def load_or_raise(schema, data, message="Validation Error"):
    """Deserialize data, turning marshmallow errors into InvalidArgument."""
    try:
        return schema.load(data if data is not None else {})
    except ValidationError as err:
        raise InvalidArgument(message, errors=err.messages) from err


__all__ = [
    "AvailabilitySlotSchema", "BriefUserSchema", "ProfileSchema",
    "ProfileUpdateSchema", "PublicProfileSchema",
    "MatchCreateSchema", "MatchRespondSchema", "MatchSchema",
    "PlannedWorkoutCreateSchema", "PlannedWorkoutSchema", "PlannedWorkoutUpdateSchema",
    "NearbyQuerySchema", "SuggestionQuerySchema",
    "load_or_raise",
]
