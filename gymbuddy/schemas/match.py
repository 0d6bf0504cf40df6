from marshmallow import EXCLUDE, fields, validate

from gymbuddy.extensions import ma
from gymbuddy.models.planned_workout import PLANNED_WORKOUT_STATUSES
from gymbuddy.models.user import WORKOUT_TYPES
from .profile import BriefUserSchema


class PlannedWorkoutSchema(ma.Schema):
    id = fields.Integer()
    match_id = fields.Integer(data_key="matchId")
    proposer_id = fields.Integer(data_key="proposer")
    scheduled_for = fields.DateTime(data_key="date")
    workout_type = fields.String(data_key="workoutType", allow_none=True)
    location = fields.String(allow_none=True)
    status = fields.String()


class MatchSchema(ma.Schema):
    id = fields.Integer()
    initiator_id = fields.Integer(data_key="initiator")
    receiver_id = fields.Integer(data_key="receiver")
    initiator = fields.Nested(BriefUserSchema, data_key="initiatorUser")
    receiver = fields.Nested(BriefUserSchema, data_key="receiverUser")
    status = fields.String()
    match_score = fields.Integer(data_key="matchScore")
    compatibility_factors = fields.Dict(data_key="compatibilityFactors")
    is_active = fields.Boolean(data_key="isActive")
    matched_at = fields.DateTime(data_key="matchedAt")
    expires_at = fields.DateTime(data_key="expiresAt", allow_none=True)
    planned_workouts = fields.List(fields.Nested(PlannedWorkoutSchema), data_key="plannedWorkouts")


class MatchCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    receiver_id = fields.Integer(data_key="receiverId", required=True)


class MatchRespondSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.String(
        required=True,
        validate=validate.OneOf(("accepted", "rejected"), error="Status must be accepted or rejected"),
    )


class PlannedWorkoutCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    scheduled_for = fields.DateTime(data_key="date", required=True, error_messages={"invalid": "Invalid date format"})
    workout_type = fields.String(data_key="workoutType", validate=validate.OneOf(WORKOUT_TYPES))
    location = fields.String(load_default="", validate=validate.Length(max=255))
    status = fields.String(load_default="proposed", validate=validate.OneOf(("proposed", "confirmed")))


class PlannedWorkoutUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.String(
        required=True,
        validate=validate.OneOf(PLANNED_WORKOUT_STATUSES, error="Invalid status"),
    )
