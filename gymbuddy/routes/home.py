from flask import Blueprint, jsonify

home_bp = Blueprint("home", __name__)


@home_bp.route("/", methods=["GET"])
def index():
    return jsonify({"msg": "Welcome to Gym Buddy API"})
