from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from gymbuddy.errors import NotFound, PreconditionFailed
from gymbuddy.extensions import db
from gymbuddy.matching.geo import bounding_box, distance_km
from gymbuddy.models import User
from gymbuddy.schemas import NearbyQuerySchema, PublicProfileSchema, load_or_raise
from gymbuddy.utils.decorators import with_current_user

users_bp = Blueprint("users", __name__)

public_profile_schema = PublicProfileSchema()
nearby_query_schema = NearbyQuerySchema()


def find_nearby(current_user, default_distance, user_type=None):
    """Active users within the requested radius of current_user, nearest first."""
    query = load_or_raise(nearby_query_schema, request.args.to_dict(), "Invalid query parameters")
    max_distance = query.get("distance", default_distance)

    origin = current_user.location
    if origin is None:
        raise PreconditionFailed("Set your location to find nearby users")

    users = User.query.filter(
        User.id != current_user.id,
        User.is_active.is_(True),
        User.account_status == "active",
        User.within_box(bounding_box(origin, max_distance)),
    )
    if user_type:
        users = users.filter(User.user_type == user_type)

    nearby = []
    for user in users.all():
        if user.location is None:
            continue
        distance = distance_km(origin, user.location)
        if distance <= max_distance:
            nearby.append((distance, user.id, user))
    nearby.sort(key=lambda item: (item[0], item[1]))

    return [
        {**public_profile_schema.dump(user), "distanceKm": round(distance, 2)}
        for distance, _, user in nearby[:query["limit"]]
    ]


# Get nearby users, nearest first
@users_bp.route("/nearby", methods=["GET"])
@with_current_user
def get_nearby_users(current_user):
    return jsonify(find_nearby(current_user, current_app.config["MATCH_SUGGESTION_DISTANCE_KM"]))


# Get nearby instructors, nearest first
@users_bp.route("/nearby/instructors", methods=["GET"])
@with_current_user
def get_nearby_instructors(current_user):
    return jsonify(find_nearby(
        current_user,
        current_app.config["MATCH_DEFAULT_DISTANCE_KM"],
        user_type="instructor",
    ))


# Get a user's public profile
@users_bp.route("/<int:user_id>", methods=["GET"])
@jwt_required()
def get_user_by_id(user_id):
    user = db.session.get(User, user_id)
    if not user or not user.is_active or user.account_status == "deleted":
        raise NotFound("User not found")
    return jsonify(public_profile_schema.dump(user))
