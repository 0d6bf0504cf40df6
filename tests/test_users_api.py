from tests.factories import ORIGIN, north_of


def test_nearby_sorted_by_distance(client, make_user, auth_headers):
    me = make_user()
    farther = make_user(location=north_of(ORIGIN, 4))
    closer = make_user(location=north_of(ORIGIN, 1))
    make_user(location=north_of(ORIGIN, 40))
    make_user(account_status="deleted")

    body = client.get("/api/users/nearby", headers=auth_headers(me)).get_json()

    assert [user["id"] for user in body] == [closer.id, farther.id]
    assert body[0]["distanceKm"] == 1.0


def test_nearby_distance_and_limit(client, make_user, auth_headers):
    me = make_user()
    ids = [make_user(location=north_of(ORIGIN, km)).id for km in (1, 2, 30)]

    body = client.get("/api/users/nearby?distance=50&limit=2", headers=auth_headers(me)).get_json()
    assert [user["id"] for user in body] == ids[:2]

    body = client.get("/api/users/nearby?distance=50", headers=auth_headers(me)).get_json()
    assert [user["id"] for user in body] == ids


def test_nearby_without_location(client, make_user, auth_headers):
    me = make_user(location=None)
    response = client.get("/api/users/nearby", headers=auth_headers(me))
    assert response.status_code == 400
    assert response.get_json()["msg"] == "Set your location to find nearby users"


def test_get_user_public_profile(client, make_user, auth_headers):
    me = make_user()
    other = make_user(bio="Morning runner")

    body = client.get(f"/api/users/{other.id}", headers=auth_headers(me)).get_json()

    assert body["bio"] == "Morning runner"
    assert "email" not in body
    assert "age" not in body


def test_get_user_hidden_or_missing(client, make_user, auth_headers):
    me = make_user()
    gone = make_user(account_status="deleted")
    inactive = make_user(is_active=False)

    for user_id in (gone.id, inactive.id, 999):
        response = client.get(f"/api/users/{user_id}", headers=auth_headers(me))
        assert response.status_code == 404
        assert response.get_json() == {"msg": "User not found"}


def test_home(client):
    assert client.get("/").get_json() == {"msg": "Welcome to Gym Buddy API"}


def test_unknown_route_returns_json(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "msg" in response.get_json()


def test_nearby_instructors(client, make_user, auth_headers):
    me = make_user()
    make_user(location=north_of(ORIGIN, 1))
    coach = make_user(user_type="instructor", location=north_of(ORIGIN, 15))
    make_user(user_type="instructor", location=north_of(ORIGIN, 25))
    make_user(user_type="instructor", is_active=False)

    body = client.get("/api/users/nearby/instructors", headers=auth_headers(me)).get_json()
    assert [user["id"] for user in body] == [coach.id]

    body = client.get("/api/users/nearby/instructors?distance=30", headers=auth_headers(me)).get_json()
    assert len(body) == 2


def test_nearby_across_the_antimeridian(client, make_user, auth_headers):
    me = make_user(location=(179.99, -17.0))
    across = make_user(location=(-179.99, -17.0))

    body = client.get("/api/users/nearby", headers=auth_headers(me)).get_json()

    assert [user["id"] for user in body] == [across.id]
    assert body[0]["distanceKm"] < 3
