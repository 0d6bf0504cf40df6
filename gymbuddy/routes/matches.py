from datetime import datetime, timedelta

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from gymbuddy.errors import Conflict, Forbidden, InvalidArgument, NotFound, PreconditionFailed
from gymbuddy.extensions import db
from gymbuddy.matching.matcher import INCOMPLETE_PROFILE_MESSAGE, ensure_complete
from gymbuddy.matching.scoring import calculate_compatibility
from gymbuddy.matching.service import MatchFinder
from gymbuddy.models import Match, PlannedWorkout, User
from gymbuddy.presence import notify
from gymbuddy.schemas import (
    BriefUserSchema,
    MatchCreateSchema,
    MatchRespondSchema,
    MatchSchema,
    PlannedWorkoutCreateSchema,
    PlannedWorkoutSchema,
    PlannedWorkoutUpdateSchema,
    SuggestionQuerySchema,
    load_or_raise,
)
from gymbuddy.utils.db import commit
from gymbuddy.utils.decorators import current_identity, with_current_user

matches_bp = Blueprint("matches", __name__)

match_schema = MatchSchema()
matches_schema = MatchSchema(many=True)
brief_user_schema = BriefUserSchema()
suggestion_query_schema = SuggestionQuerySchema()
match_create_schema = MatchCreateSchema()
match_respond_schema = MatchRespondSchema()
planned_workout_schema = PlannedWorkoutSchema()
planned_workouts_schema = PlannedWorkoutSchema(many=True)
planned_workout_create_schema = PlannedWorkoutCreateSchema()
planned_workout_update_schema = PlannedWorkoutUpdateSchema()


def get_match_for(match_id, user_id):
    match = db.session.get(Match, match_id)
    if not match:
        raise NotFound("Match not found")
    if not match.has_participant(user_id):
        raise Forbidden("Not authorized to access this match")
    return match


def suggestion_options(args):
    config = current_app.config
    query = load_or_raise(suggestion_query_schema, args.to_dict(), "Invalid query parameters")

    distance = query.get("distance", config["MATCH_SUGGESTION_DISTANCE_KM"])
    limit = query.get("limit", config["MATCH_DEFAULT_LIMIT"])
    min_score = query.get("min_score", config["MATCH_MIN_SCORE"])

    errors = {}
    if distance > config["MATCH_MAX_DISTANCE_KM"]:
        errors["distance"] = [f"Must be at most {config['MATCH_MAX_DISTANCE_KM']} km."]
    if limit > config["MATCH_MAX_LIMIT"]:
        errors["limit"] = [f"Must be at most {config['MATCH_MAX_LIMIT']}."]
    if errors:
        raise InvalidArgument("Invalid query parameters", errors=errors)

    return distance, limit, min_score, query["type"]


# Get match suggestions based on compatibility
@matches_bp.route("/suggestions", methods=["GET"])
@jwt_required()
def get_match_suggestions():
    finder = MatchFinder.from_config(current_app.config)
    requester = finder.load_requester(current_identity())
    # An incomplete profile is reported before any query parameter problem
    ensure_complete(requester)

    distance, limit, min_score, user_type = suggestion_options(request.args)
    ranked = finder.rank_for(
        requester,
        max_distance_km=distance,
        limit=limit,
        min_score=min_score,
        user_type=user_type,
    )
    return jsonify([item.as_suggestion() for item in ranked])


# Create a new match request
@matches_bp.route("", methods=["POST"])
@with_current_user
def create_match(current_user):
    data = load_or_raise(match_create_schema, request.get_json(silent=True))
    receiver_id = data["receiver_id"]

    if receiver_id == current_user.id:
        raise InvalidArgument("You cannot match with yourself")
    if not current_user.is_profile_complete:
        raise PreconditionFailed(INCOMPLETE_PROFILE_MESSAGE)

    receiver = db.session.get(User, receiver_id)
    if not receiver:
        raise NotFound("User not found")
    if not receiver.is_matchable:
        raise PreconditionFailed("This user is not available for matching")

    if Match.between(current_user.id, receiver.id).first():
        raise Conflict("A match already exists with this user")

    compatibility = calculate_compatibility(current_user.to_match_profile(), receiver.to_match_profile())
    now = datetime.utcnow()
    match = Match(
        initiator_id=current_user.id,
        receiver_id=receiver.id,
        status="pending",
        matched_at=now,
        expires_at=now + timedelta(days=current_app.config["MATCH_REQUEST_TTL_DAYS"]),
    )
    match.apply_compatibility(compatibility)
    db.session.add(match)
    # the unique pair key catches a concurrent request from either side
    commit("create match", conflict="A match already exists with this user")

    notify(receiver.id, "match_request", {
        "matchId": match.id,
        "from": brief_user_schema.dump(current_user),
        "matchScore": match.match_score,
    })
    return jsonify(match_schema.dump(match)), 201


# Respond to a match request
@matches_bp.route("/<int:match_id>/respond", methods=["PUT"])
@jwt_required()
def respond_to_match(match_id):
    identity = current_identity()
    data = load_or_raise(match_respond_schema, request.get_json(silent=True))

    match = get_match_for(match_id, identity)
    if match.receiver_id != identity:
        raise Forbidden("Not authorized to respond to this match")
    if match.status != "pending":
        raise PreconditionFailed(f"Match is already {match.status}")

    now = datetime.utcnow()
    if match.expires_at and match.expires_at <= now:
        match.status = "expired"
        commit("expire match")
        raise PreconditionFailed("Match request has expired")

    match.status = data["status"]
    if match.status == "accepted":
        match.matched_at = now
    commit("respond to match")

    notify(match.other_user_id(identity), "match_response", {
        "matchId": match.id,
        "status": match.status,
    })
    return jsonify(match_schema.dump(match))


# Get match details
@matches_bp.route("/<int:match_id>", methods=["GET"])
@jwt_required()
def get_match_details(match_id):
    match = get_match_for(match_id, current_identity())
    return jsonify(match_schema.dump(match))


# Get active matches for the current user
@matches_bp.route("/list/active", methods=["GET"])
@jwt_required()
def get_active_matches():
    matches = (
        Match.involving(current_identity())
        .filter(Match.status == "accepted", Match.is_active.is_(True))
        .order_by(Match.matched_at.desc())
        .all()
    )
    return jsonify(matches_schema.dump(matches))


# Get pending matches for the current user
@matches_bp.route("/list/pending", methods=["GET"])
@jwt_required()
def get_pending_matches():
    matches = (
        Match.involving(current_identity())
        .filter(Match.status == "pending", Match.is_active.is_(True))
        .order_by(Match.matched_at.desc())
        .all()
    )
    return jsonify(matches_schema.dump(matches))


# Unmatch with a user (soft delete; the pair stays excluded from suggestions)
@matches_bp.route("/<int:match_id>/unmatch", methods=["PUT"])
@jwt_required()
def unmatch(match_id):
    match = get_match_for(match_id, current_identity())
    match.is_active = False
    commit("unmatch")
    return jsonify({"msg": "Successfully unmatched"})


def get_planned_workout(match, workout_id):
    workout = db.session.get(PlannedWorkout, workout_id)
    if not workout or workout.match_id != match.id:
        raise NotFound("Planned workout not found")
    return workout


# List workouts planned within a match
@matches_bp.route("/<int:match_id>/workouts", methods=["GET"])
@jwt_required()
def get_planned_workouts(match_id):
    match = get_match_for(match_id, current_identity())
    return jsonify(planned_workouts_schema.dump(match.planned_workouts))


# Plan a workout with an accepted match
@matches_bp.route("/<int:match_id>/workouts", methods=["POST"])
@jwt_required()
def plan_workout(match_id):
    identity = current_identity()
    data = load_or_raise(planned_workout_create_schema, request.get_json(silent=True))

    match = get_match_for(match_id, identity)
    if match.status != "accepted" or not match.is_active:
        raise PreconditionFailed("Cannot plan workouts in a match that is not accepted")

    workout = PlannedWorkout(
        match_id=match.id,
        proposer_id=identity,
        scheduled_for=data["scheduled_for"],
        workout_type=data.get("workout_type"),
        location=data["location"],
        status=data["status"],
    )
    db.session.add(workout)
    commit("plan workout")

    payload = planned_workout_schema.dump(workout)
    notify(match.other_user_id(identity), "workout_planned", payload)
    return jsonify(payload), 201


# Update the status of a planned workout
@matches_bp.route("/<int:match_id>/workouts/<int:workout_id>", methods=["PUT"])
@jwt_required()
def update_planned_workout(match_id, workout_id):
    identity = current_identity()
    data = load_or_raise(planned_workout_update_schema, request.get_json(silent=True))

    match = get_match_for(match_id, identity)
    workout = get_planned_workout(match, workout_id)
    if workout.status in ("completed", "cancelled"):
        raise PreconditionFailed(f"Workout is already {workout.status}")

    workout.status = data["status"]
    commit("update planned workout")

    payload = planned_workout_schema.dump(workout)
    notify(match.other_user_id(identity), "workout_updated", payload)
    return jsonify(payload)
