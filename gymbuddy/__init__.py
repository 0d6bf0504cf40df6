import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from gymbuddy.config import config
from gymbuddy.errors import register_error_handlers
from gymbuddy.extensions import db, jwt, ma, migrate, scheduler, socketio
from gymbuddy import presence  # noqa: F401  registers socket handlers

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(app):
    """Set the root log level from LOG_LEVEL and attach one stream handler."""
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    root = logging.getLogger()
    if not any(getattr(handler, "_gymbuddy", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gymbuddy = True
        root.addHandler(handler)
    root.setLevel(level)


def configure_scheduler(app):
    """Start the periodic jobs once per process."""
    from gymbuddy.jobs import register_jobs

    if not app.config.get("SCHEDULER_ENABLED", False) or scheduler.running:
        return
    try:
        scheduler.init_app(app)
        register_jobs(app, scheduler)
        scheduler.start()
    except Exception as e:
        # the reloader can initialize twice
        if "already" not in str(e):
            raise


def create_app(config_name=None):
    app = Flask(__name__)
    config_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config[config_name])

    configure_logging(app)

    # extensions
    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    CORS(app, resources={r"/api/*": {
        "origins": app.config["CORS_ORIGINS"],
        "allow_headers": ["Content-Type", "Authorization"],
        "methods": ["GET", "POST", "PUT", "OPTIONS"]
    }})
    socketio.init_app(app, async_mode=app.config["SOCKETIO_ASYNC_MODE"])

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"msg": "Token expired. Please log in again."}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({"msg": "Invalid token. Please log in again."}), 401

    @jwt.unauthorized_loader
    def unauthorized_callback(error):
        return jsonify({"msg": "No token, authorization denied"}), 401

    register_error_handlers(app)

    # Blueprints
    from gymbuddy.cli import register_commands
    from gymbuddy.routes.home import home_bp
    from gymbuddy.routes.matches import matches_bp
    from gymbuddy.routes.profile import profile_bp
    from gymbuddy.routes.users import users_bp

    app.register_blueprint(home_bp)
    app.register_blueprint(matches_bp, url_prefix="/api/matches")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(users_bp, url_prefix="/api/users")

    register_commands(app)
    configure_scheduler(app)

    return app

