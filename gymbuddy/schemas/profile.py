from marshmallow import EXCLUDE, ValidationError, fields, validate, validates_schema

from gymbuddy.extensions import ma
from gymbuddy.matching.scoring import to_minutes
from gymbuddy.models.availability_slot import WEEKDAYS
from gymbuddy.models.user import (
    FITNESS_GOALS,
    FITNESS_LEVELS,
    GENDERS,
    PREFERRED_GENDERS,
    WORKOUT_TYPES,
)

CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def serialize_location(user):
    point = user.location
    return {
        "type": "Point",
        "coordinates": list(point) if point else [0, 0],
        "address": user.address or "",
    }


class BriefUserSchema(ma.Schema):
    id = fields.Integer()
    name = fields.String()
    profile_image = fields.String(data_key="profileImage", allow_none=True)


class AvailabilitySlotSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    day = fields.String(required=True, validate=validate.OneOf(WEEKDAYS))
    start_time = fields.String(data_key="startTime", required=True, validate=validate.Regexp(CLOCK_PATTERN))
    end_time = fields.String(data_key="endTime", required=True, validate=validate.Regexp(CLOCK_PATTERN))

    @validates_schema
    def check_order(self, data, **kwargs):
        start = to_minutes(data.get("start_time"))
        end = to_minutes(data.get("end_time"))
        if start is not None and end is not None and start >= end:
            raise ValidationError("endTime must be after startTime", field_name="endTime")


class PublicProfileSchema(ma.Schema):
    """Public-safe projection of a profile shown to other users."""
    id = fields.Integer()
    name = fields.String()
    profile_image = fields.String(data_key="profileImage", allow_none=True)
    bio = fields.String(allow_none=True)
    fitness_level = fields.String(data_key="fitnessLevel", allow_none=True)
    fitness_goals = fields.List(fields.String(), data_key="fitnessGoals")
    preferred_workouts = fields.List(fields.String(), data_key="preferredWorkouts")
    location = fields.Method("get_location")

    def get_location(self, user):
        return serialize_location(user)


class ProfileSchema(PublicProfileSchema):
    """The owner's view of their own profile."""
    email = fields.String()
    user_type = fields.String(data_key="userType")
    age = fields.Integer(allow_none=True)
    gender = fields.String(allow_none=True)
    availability = fields.List(fields.Nested(AvailabilitySlotSchema))
    preferred_gender = fields.String(data_key="preferredGender")
    preferred_age_min = fields.Integer(data_key="preferredAgeMin", allow_none=True)
    preferred_age_max = fields.Integer(data_key="preferredAgeMax", allow_none=True)
    is_profile_complete = fields.Boolean(data_key="isProfileComplete")
    is_active = fields.Boolean(data_key="isActive")
    account_status = fields.String(data_key="accountStatus")
    deactivated_at = fields.DateTime(data_key="deactivatedAt", allow_none=True)


class LocationSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    coordinates = fields.List(fields.Float(), required=True, validate=validate.Length(equal=2))
    address = fields.String(load_default="")

    @validates_schema
    def check_range(self, data, **kwargs):
        coordinates = data.get("coordinates") or []
        if len(coordinates) != 2:
            return
        lon, lat = coordinates
        if not (-180 <= lon <= 180 and -90 <= lat <= 90):
            raise ValidationError("Coordinates must be [longitude, latitude]", field_name="coordinates")


class ProfileUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=validate.Length(min=2, max=150))
    bio = fields.String(validate=validate.Length(max=1000))
    profile_image = fields.String(data_key="profileImage", allow_none=True)
    age = fields.Integer(validate=validate.Range(min=16, max=100))
    gender = fields.String(validate=validate.OneOf(GENDERS))
    fitness_level = fields.String(data_key="fitnessLevel", validate=validate.OneOf(FITNESS_LEVELS))
    fitness_goals = fields.List(
        fields.String(validate=validate.OneOf(FITNESS_GOALS)), data_key="fitnessGoals"
    )
    preferred_workouts = fields.List(
        fields.String(validate=validate.OneOf(WORKOUT_TYPES)), data_key="preferredWorkouts"
    )
    availability = fields.List(fields.Nested(AvailabilitySlotSchema))
    preferred_gender = fields.String(data_key="preferredGender", validate=validate.OneOf(PREFERRED_GENDERS))
    preferred_age_min = fields.Integer(data_key="preferredAgeMin", validate=validate.Range(min=16, max=100))
    preferred_age_max = fields.Integer(data_key="preferredAgeMax", validate=validate.Range(min=16, max=100))
    location = fields.Nested(LocationSchema)

    @validates_schema
    def check_age_window(self, data, **kwargs):
        age_min = data.get("preferred_age_min")
        age_max = data.get("preferred_age_max")
        if age_min is not None and age_max is not None and age_min > age_max:
            raise ValidationError("preferredAgeMin cannot exceed preferredAgeMax", field_name="preferredAgeMin")
