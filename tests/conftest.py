import pytest
from flask_jwt_extended import create_access_token

from gymbuddy import create_app
from gymbuddy.extensions import db as _db
from gymbuddy.models import AvailabilitySlot, Match, User
from gymbuddy.presence import presence
from tests.factories import ORIGIN


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()
    presence.clear()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def make_user(db):
    """Persist a complete, active user; any column can be overridden."""
    counter = {"n": 0}

    def _make(location=ORIGIN, availability=(), **overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "email": f"user{n}@example.com",
            "name": f"User {n}",
            "age": 30,
            "gender": "female",
            "fitness_level": "intermediate",
            "fitness_goals": ["weight_loss", "endurance"],
            "preferred_workouts": ["running", "cycling"],
            "is_active": True,
            "account_status": "active",
            "is_profile_complete": True,
        }
        fields.update(overrides)
        user = User(**fields)
        user.location = location
        user.availability = [
            AvailabilitySlot(day=day, start_time=start, end_time=end)
            for day, start, end in availability
        ]
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_match(db):
    def _make(initiator, receiver, status="pending", **overrides):
        match = Match(initiator_id=initiator.id, receiver_id=receiver.id, status=status, **overrides)
        db.session.add(match)
        db.session.commit()
        return match
    return _make
