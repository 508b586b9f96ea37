from mountaintop.models import LeagueMembership


def test_my_leagues(client, login, make_user, make_league):
    alice = make_user("alice")
    bob = make_user("bob")
    make_league(bob, name="Summit", members=[alice])
    make_league(alice, name="Basecamp")
    make_league(bob, name="Bob Only")
    login(alice)

    response = client.get("/api/leagues")

    assert response.status_code == 200
    data = response.get_json()
    assert [league["name"] for league in data] == ["Basecamp", "Summit"]
    assert data[1]["member_count"] == 2


def test_my_leagues_requires_login(client):
    assert client.get("/api/leagues").status_code == 401


def test_join_by_code(client, login, db, make_user, make_league):
    owner = make_user("alice")
    league = make_league(owner, name="Summit")
    bob = make_user("bob")
    login(bob)

    response = client.post(
        "/api/leagues/join", json={"code": f"  {league.code.lower()} "}
    )

    assert response.status_code == 201
    assert response.get_json()["id"] == league.id
    assert response.get_json()["member_count"] == 2
    membership = LeagueMembership.query.filter_by(
        league_id=league.id, user_id=bob.id
    ).one()
    assert membership.role == "member"
    assert membership.is_active


def test_join_twice_is_rejected(client, login, make_user, make_league):
    alice = make_user("alice")
    league = make_league(alice)
    login(alice)

    response = client.post("/api/leagues/join", json={"code": league.code})

    assert response.status_code == 400
    assert response.get_json()["error"] == "You are already a member of this league"


def test_rejoin_reactivates_membership(client, login, db, make_user, make_league):
    alice = make_user("alice")
    bob = make_user("bob")
    league = make_league(alice, members=[bob])
    membership = LeagueMembership.query.filter_by(user_id=bob.id).one()
    membership.is_active = False
    db.session.commit()
    login(bob)

    response = client.post("/api/leagues/join", json={"code": league.code})

    assert response.status_code == 201
    assert LeagueMembership.query.filter_by(user_id=bob.id).count() == 1
    assert league.is_user_member(bob.id)


def test_join_unknown_code(client, login, make_user):
    login(make_user("bob"))

    response = client.post("/api/leagues/join", json={"code": "ZZZZ-9999"})

    assert response.status_code == 404
    assert response.get_json()["code"] == "NOT_FOUND"


def test_join_inactive_league(client, login, db, make_user, make_league):
    league = make_league(make_user("alice"))
    league.is_active = False
    db.session.commit()
    login(make_user("bob"))

    response = client.post("/api/leagues/join", json={"code": league.code})

    assert response.status_code == 400
    assert response.get_json()["error"] == "This league is no longer active"


def test_join_validates_code_shape(client, login, make_user):
    login(make_user("bob"))

    missing = client.post("/api/leagues/join", json={})
    malformed = client.post("/api/leagues/join", json={"code": "nope"})

    assert missing.status_code == 400
    assert missing.get_json()["details"]["code"] == "League code is required"
    assert malformed.status_code == 400
    assert "code" in malformed.get_json()["details"]


def test_join_requires_login(client):
    response = client.post("/api/leagues/join", json={"code": "ABCD-1234"})
    assert response.status_code == 401
