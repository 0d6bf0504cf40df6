from flask_jwt_extended import create_access_token

from gymbuddy.extensions import socketio
from gymbuddy.presence import PresenceRegistry, notify, presence
from tests.factories import ORIGIN, north_of


def test_registry_tracks_multiple_connections():
    registry = PresenceRegistry()
    registry.connect(1, "a")
    registry.connect(1, "b")

    assert registry.sids_for(1) == {"a", "b"}
    assert registry.disconnect("a") == 1
    assert registry.is_online(1)
    assert registry.disconnect("b") == 1
    assert not registry.is_online(1)
    assert registry.disconnect("unknown") is None


def test_connect_with_token(app, make_user):
    me = make_user()
    socket = socketio.test_client(app, auth={"token": create_access_token(identity=str(me.id))})

    assert socket.is_connected()
    assert presence.is_online(me.id)

    socket.disconnect()
    assert not presence.is_online(me.id)


def test_connect_rejected_without_valid_token(app):
    assert not socketio.test_client(app).is_connected()
    assert not socketio.test_client(app, auth={"token": "not-a-jwt"}).is_connected()


def test_notify_offline_user(app):
    assert notify(42, "match_request", {}) is False


def test_match_request_is_pushed_to_receiver(app, client, make_user, auth_headers):
    me = make_user()
    other = make_user(location=north_of(ORIGIN, 3))
    socket = socketio.test_client(app, auth={"token": create_access_token(identity=str(other.id))})

    client.post("/api/matches", json={"receiverId": other.id}, headers=auth_headers(me))

    received = socket.get_received()
    assert [event["name"] for event in received] == ["match_request"]
    payload = received[0]["args"][0]
    assert payload["from"]["id"] == me.id
    assert payload["matchScore"] == 86
