from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token
from sqlalchemy import false
from sqlalchemy.exc import IntegrityError

from gymbuddy.extensions import db
from gymbuddy.models import Match
from tests.factories import ORIGIN, north_of


def test_suggestions_require_token(client):
    response = client.get("/api/matches/suggestions")
    assert response.status_code == 401
    assert response.get_json() == {"msg": "No token, authorization denied"}


def test_suggestions_ranked(client, make_user, auth_headers):
    me = make_user()
    near = make_user(location=north_of(ORIGIN, 0.5))
    farther = make_user(location=north_of(ORIGIN, 3))
    make_user(location=north_of(ORIGIN, 30))
    make_user(is_active=False)
    make_user(user_type="instructor")

    response = client.get("/api/matches/suggestions", headers=auth_headers(me))

    assert response.status_code == 200
    body = response.get_json()
    assert [item["user"]["id"] for item in body] == [near.id, farther.id]
    assert body[0]["matchScore"] == 90
    assert body[0]["compatibilityFactors"]["locationProximity"] == 100
    assert "email" not in body[0]["user"]


def test_suggestions_query_parameters(client, make_user, auth_headers):
    me = make_user()
    near = make_user(location=north_of(ORIGIN, 0.5))
    far = make_user(location=north_of(ORIGIN, 30))
    coach = make_user(user_type="instructor")

    body = client.get("/api/matches/suggestions?distance=40&limit=1", headers=auth_headers(me)).get_json()
    assert len(body) == 1

    body = client.get("/api/matches/suggestions?distance=40", headers=auth_headers(me)).get_json()
    assert [item["user"]["id"] for item in body] == [near.id, far.id]

    body = client.get("/api/matches/suggestions?distance=40&min_score=80", headers=auth_headers(me)).get_json()
    assert [item["user"]["id"] for item in body] == [near.id]

    body = client.get("/api/matches/suggestions?type=instructor", headers=auth_headers(me)).get_json()
    assert [item["user"]["id"] for item in body] == [coach.id]


def test_suggestions_respect_preferences(client, make_user, auth_headers):
    me = make_user(preferred_gender="male", preferred_age_min=25, preferred_age_max=35)
    match = make_user(gender="male", age=30)
    make_user(gender="female", age=30)
    make_user(gender="male", age=40)

    body = client.get("/api/matches/suggestions", headers=auth_headers(me)).get_json()
    assert [item["user"]["id"] for item in body] == [match.id]


def test_suggestions_exclude_existing_matches(client, make_user, make_match, auth_headers):
    me = make_user()
    rejected = make_user()
    pending = make_user()
    fresh = make_user()
    make_match(me, rejected, status="rejected")
    make_match(pending, me)

    body = client.get("/api/matches/suggestions", headers=auth_headers(me)).get_json()
    assert [item["user"]["id"] for item in body] == [fresh.id]


def test_suggestions_incomplete_profile(client, make_user, auth_headers):
    me = make_user(is_profile_complete=False)
    response = client.get("/api/matches/suggestions", headers=auth_headers(me))
    assert response.status_code == 400
    assert response.get_json()["msg"] == "Please complete your profile before getting match suggestions"


def test_incomplete_profile_reported_before_bad_parameters(client, make_user, auth_headers):
    me = make_user(is_profile_complete=False)
    response = client.get("/api/matches/suggestions?limit=999&distance=abc", headers=auth_headers(me))
    assert response.status_code == 400
    assert response.get_json()["msg"] == "Please complete your profile before getting match suggestions"


def test_suggestions_unknown_user(client, app):
    token = create_access_token(identity="999")
    response = client.get("/api/matches/suggestions", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404


def test_suggestions_invalid_parameters(client, make_user, auth_headers):
    me = make_user()
    for query in ("limit=0", "distance=-1", "distance=abc", "limit=51", "distance=501", "type=coach"):
        response = client.get(f"/api/matches/suggestions?{query}", headers=auth_headers(me))
        assert response.status_code == 400, query
        assert response.get_json()["msg"] == "Invalid query parameters"


def test_create_match(client, make_user, auth_headers):
    me = make_user()
    other = make_user(location=north_of(ORIGIN, 3))

    response = client.post("/api/matches", json={"receiverId": other.id}, headers=auth_headers(me))

    assert response.status_code == 201
    body = response.get_json()
    assert body["initiator"] == me.id
    assert body["receiver"] == other.id
    assert body["status"] == "pending"
    assert body["matchScore"] == 86
    assert body["compatibilityFactors"]["locationProximity"] == 80
    assert body["initiatorUser"]["name"] == me.name


def test_create_match_errors(client, make_user, make_match, auth_headers):
    me = make_user()
    taken = make_user()
    hidden = make_user(account_status="suspended")
    make_match(taken, me, status="rejected")
    headers = auth_headers(me)

    assert client.post("/api/matches", json={}, headers=headers).status_code == 400
    assert client.post("/api/matches", json={"receiverId": me.id}, headers=headers).status_code == 400
    assert client.post("/api/matches", json={"receiverId": 999}, headers=headers).status_code == 404
    assert client.post("/api/matches", json={"receiverId": hidden.id}, headers=headers).status_code == 400

    response = client.post("/api/matches", json={"receiverId": taken.id}, headers=headers)
    assert response.status_code == 409
    assert response.get_json() == {"msg": "A match already exists with this user"}


def test_respond_accept(client, make_user, make_match, auth_headers):
    me = make_user()
    other = make_user()
    match = make_match(other, me, expires_at=datetime.utcnow() + timedelta(days=1))

    response = client.put(f"/api/matches/{match.id}/respond", json={"status": "accepted"}, headers=auth_headers(me))

    assert response.status_code == 200
    assert response.get_json()["status"] == "accepted"

    active = client.get("/api/matches/list/active", headers=auth_headers(other)).get_json()
    assert [m["id"] for m in active] == [match.id]


def test_only_receiver_can_respond(client, make_user, make_match, auth_headers):
    me = make_user()
    other = make_user()
    stranger = make_user()
    match = make_match(me, other)

    response = client.put(f"/api/matches/{match.id}/respond", json={"status": "accepted"}, headers=auth_headers(me))
    assert response.status_code == 403
    response = client.put(f"/api/matches/{match.id}/respond", json={"status": "accepted"}, headers=auth_headers(stranger))
    assert response.status_code == 403


def test_respond_validation(client, make_user, make_match, auth_headers):
    me = make_user()
    other = make_user()
    answered = make_match(other, me, status="rejected")
    pending = make_match(make_user(), me)

    response = client.put(f"/api/matches/{pending.id}/respond", json={"status": "maybe"}, headers=auth_headers(me))
    assert response.status_code == 400
    assert response.get_json()["errors"]["status"] == ["Status must be accepted or rejected"]

    response = client.put(f"/api/matches/{answered.id}/respond", json={"status": "accepted"}, headers=auth_headers(me))
    assert response.status_code == 400
    assert response.get_json()["msg"] == "Match is already rejected"


def test_respond_to_expired_request(client, make_user, make_match, auth_headers):
    me = make_user()
    match = make_match(make_user(), me, expires_at=datetime.utcnow() - timedelta(minutes=1))

    response = client.put(f"/api/matches/{match.id}/respond", json={"status": "accepted"}, headers=auth_headers(me))

    assert response.status_code == 400
    assert response.get_json()["msg"] == "Match request has expired"
    assert db.session.get(Match, match.id).status == "expired"


def test_get_match_details(client, make_user, make_match, auth_headers):
    me = make_user()
    match = make_match(me, make_user())

    assert client.get(f"/api/matches/{match.id}", headers=auth_headers(me)).status_code == 200
    assert client.get(f"/api/matches/{match.id}", headers=auth_headers(make_user())).status_code == 403
    assert client.get("/api/matches/999", headers=auth_headers(me)).status_code == 404


def test_pending_list(client, make_user, make_match, auth_headers):
    me = make_user()
    incoming = make_match(make_user(), me)
    make_match(make_user(), me, status="accepted")

    pending = client.get("/api/matches/list/pending", headers=auth_headers(me)).get_json()
    assert [m["id"] for m in pending] == [incoming.id]


def test_unmatch(client, make_user, make_match, auth_headers):
    me = make_user()
    other = make_user()
    match = make_match(me, other, status="accepted")

    response = client.put(f"/api/matches/{match.id}/unmatch", headers=auth_headers(other))

    assert response.get_json() == {"msg": "Successfully unmatched"}
    assert client.get("/api/matches/list/active", headers=auth_headers(me)).get_json() == []
    # still excluded from suggestions
    body = client.get("/api/matches/suggestions", headers=auth_headers(me)).get_json()
    assert other.id not in [item["user"]["id"] for item in body]


def test_pair_is_unique_in_either_direction(make_user, make_match):
    me = make_user()
    other = make_user()
    make_match(me, other, status="rejected")

    db.session.add(Match(initiator_id=other.id, receiver_id=me.id))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


def test_concurrent_request_from_other_side_is_a_conflict(client, make_user, make_match, auth_headers, monkeypatch):
    me = make_user()
    other = make_user()
    make_match(other, me)
    # as if the other side's insert landed after our existence check
    monkeypatch.setattr(Match, "between", classmethod(lambda cls, a, b: cls.query.filter(false())))

    response = client.post("/api/matches", json={"receiverId": other.id}, headers=auth_headers(me))

    assert response.status_code == 409
    assert response.get_json() == {"msg": "A match already exists with this user"}
    assert Match.query.count() == 1
