# gymbuddy/utils/decorators.py
from functools import wraps

from flask_jwt_extended import get_jwt_identity, jwt_required

from gymbuddy.errors import NotFound
from gymbuddy.extensions import db
from gymbuddy.models import User


def current_identity():
    """JWT subject as an int user id."""
    return int(get_jwt_identity())


def with_current_user(view_func):
    """
    Require a valid JWT and pass the matching User to the view as
    `current_user`.
    """
    @wraps(view_func)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user = db.session.get(User, current_identity())
        if not user:
            raise NotFound("User not found")

        kwargs['current_user'] = user
        return view_func(*args, **kwargs)
    return wrapper
