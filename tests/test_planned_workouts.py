from flask_jwt_extended import create_access_token

from gymbuddy.extensions import socketio

WORKOUT = {"date": "2026-11-02T07:00:00", "workoutType": "running", "location": "Gezira Club"}


def test_plan_workout(client, make_user, make_match, auth_headers):
    me = make_user()
    other = make_user()
    match = make_match(me, other, status="accepted")

    response = client.post(f"/api/matches/{match.id}/workouts", json=WORKOUT, headers=auth_headers(other))

    assert response.status_code == 201
    body = response.get_json()
    assert body["proposer"] == other.id
    assert body["status"] == "proposed"
    assert body["date"].startswith("2026-11-02T07:00:00")
    assert body["workoutType"] == "running"

    planned = client.get(f"/api/matches/{match.id}/workouts", headers=auth_headers(me)).get_json()
    assert [w["id"] for w in planned] == [body["id"]]
    details = client.get(f"/api/matches/{match.id}", headers=auth_headers(me)).get_json()
    assert [w["id"] for w in details["plannedWorkouts"]] == [body["id"]]


def test_plan_workout_requires_accepted_active_match(client, make_user, make_match, auth_headers):
    me = make_user()
    pending = make_match(me, make_user())
    unmatched = make_match(me, make_user(), status="accepted", is_active=False)

    for match in (pending, unmatched):
        response = client.post(f"/api/matches/{match.id}/workouts", json=WORKOUT, headers=auth_headers(me))
        assert response.status_code == 400
        assert response.get_json()["msg"] == "Cannot plan workouts in a match that is not accepted"


def test_plan_workout_validation(client, make_user, make_match, auth_headers):
    me = make_user()
    match = make_match(me, make_user(), status="accepted")
    headers = auth_headers(me)

    response = client.post(f"/api/matches/{match.id}/workouts", json={"date": "tomorrow"}, headers=headers)
    assert response.status_code == 400
    assert response.get_json()["errors"]["date"] == ["Invalid date format"]

    response = client.post(f"/api/matches/{match.id}/workouts", json={**WORKOUT, "workoutType": "chess"}, headers=headers)
    assert response.status_code == 400

    response = client.post(f"/api/matches/{match.id}/workouts", json=WORKOUT, headers=auth_headers(make_user()))
    assert response.status_code == 403


def test_update_planned_workout(client, make_user, make_match, auth_headers):
    me = make_user()
    other = make_user()
    match = make_match(me, other, status="accepted")
    workout_id = client.post(f"/api/matches/{match.id}/workouts", json=WORKOUT, headers=auth_headers(me)).get_json()["id"]
    url = f"/api/matches/{match.id}/workouts/{workout_id}"

    response = client.put(url, json={"status": "confirmed"}, headers=auth_headers(other))
    assert response.get_json()["status"] == "confirmed"

    response = client.put(url, json={"status": "completed"}, headers=auth_headers(me))
    assert response.get_json()["status"] == "completed"

    response = client.put(url, json={"status": "cancelled"}, headers=auth_headers(me))
    assert response.status_code == 400
    assert response.get_json()["msg"] == "Workout is already completed"


def test_update_planned_workout_errors(client, make_user, make_match, auth_headers):
    me = make_user()
    match = make_match(me, make_user(), status="accepted")
    elsewhere = make_match(me, make_user(), status="accepted")
    workout_id = client.post(f"/api/matches/{match.id}/workouts", json=WORKOUT, headers=auth_headers(me)).get_json()["id"]

    response = client.put(f"/api/matches/{match.id}/workouts/{workout_id}", json={"status": "maybe"}, headers=auth_headers(me))
    assert response.status_code == 400
    assert response.get_json()["errors"]["status"] == ["Invalid status"]

    response = client.put(f"/api/matches/{elsewhere.id}/workouts/{workout_id}", json={"status": "confirmed"}, headers=auth_headers(me))
    assert response.status_code == 404
    assert response.get_json() == {"msg": "Planned workout not found"}


def test_partner_is_notified(app, client, make_user, make_match, auth_headers):
    me = make_user()
    other = make_user()
    match = make_match(me, other, status="accepted")
    socket = socketio.test_client(app, auth={"token": create_access_token(identity=str(other.id))})

    client.post(f"/api/matches/{match.id}/workouts", json=WORKOUT, headers=auth_headers(me))

    received = socket.get_received()
    assert [event["name"] for event in received] == ["workout_planned"]
    assert received[0]["args"][0]["proposer"] == me.id
