from datetime import datetime

from flask import Blueprint, jsonify, request

from gymbuddy.errors import InvalidArgument, PreconditionFailed
from gymbuddy.models import AvailabilitySlot
from gymbuddy.schemas import ProfileSchema, ProfileUpdateSchema, load_or_raise
from gymbuddy.utils.db import commit
from gymbuddy.utils.decorators import with_current_user

profile_bp = Blueprint("profile", __name__)

profile_schema = ProfileSchema()
profile_update_schema = ProfileUpdateSchema()

# Fields copied straight from the validated payload onto the user
SIMPLE_FIELDS = (
    "name", "bio", "profile_image", "age", "gender", "fitness_level",
    "preferred_gender", "preferred_age_min", "preferred_age_max",
)


# Get current user's profile
@profile_bp.route("", methods=["GET"])
@with_current_user
def get_profile(current_user):
    return jsonify(profile_schema.dump(current_user))


# Update current user's profile
@profile_bp.route("", methods=["PUT"])
@with_current_user
def update_profile(current_user):
    data = load_or_raise(profile_update_schema, request.get_json(silent=True))

    for field in SIMPLE_FIELDS:
        if field in data:
            setattr(current_user, field, data[field])

    # Tag lists are stored de-duplicated, in first-seen order
    if "fitness_goals" in data:
        current_user.fitness_goals = list(dict.fromkeys(data["fitness_goals"]))
    if "preferred_workouts" in data:
        current_user.preferred_workouts = list(dict.fromkeys(data["preferred_workouts"]))

    if "location" in data:
        location = data["location"]
        current_user.location = tuple(location["coordinates"])
        current_user.address = location.get("address", "")

    if "availability" in data:
        current_user.availability = [
            AvailabilitySlot(day=slot["day"], start_time=slot["start_time"], end_time=slot["end_time"])
            for slot in data["availability"]
        ]

    if (current_user.preferred_age_min or 0) > (current_user.preferred_age_max or 100):
        raise InvalidArgument("Validation Error", errors={"preferredAgeMin": ["preferredAgeMin cannot exceed preferredAgeMax"]})

    current_user.refresh_profile_completeness()
    commit("update profile")
    return jsonify(profile_schema.dump(current_user))


# Deactivate current user's account; hides it from matching and search
@profile_bp.route("/deactivate", methods=["PUT"])
@with_current_user
def deactivate_account(current_user):
    current_user.is_active = False
    current_user.deactivated_at = datetime.utcnow()
    commit("deactivate account")
    return jsonify({"msg": "Account deactivated successfully", "user": profile_schema.dump(current_user)})


# Reactivate current user's account
@profile_bp.route("/reactivate", methods=["PUT"])
@with_current_user
def reactivate_account(current_user):
    if current_user.account_status in ("suspended", "deleted"):
        raise PreconditionFailed(f"A {current_user.account_status} account cannot be reactivated")

    current_user.is_active = True
    current_user.account_status = "active"
    current_user.deactivated_at = None
    commit("reactivate account")
    return jsonify({"msg": "Account reactivated successfully", "user": profile_schema.dump(current_user)})
