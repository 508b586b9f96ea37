import pytest
from sqlalchemy.exc import SQLAlchemyError

from mountaintop.models import Game, Pick
from mountaintop.services.scoring import PickScorer


@pytest.fixture
def admin(make_user):
    return make_user("commish", is_admin=True)


def test_list_games_for_week(client, week, make_game, make_season, make_week):
    first = make_game(week)
    make_game(make_week(make_season(2025), 1))

    response = client.get(f"/api/games?week_id={week.id}")

    assert response.status_code == 200
    assert [g["id"] for g in response.get_json()] == [first.id]


def test_list_games_rejects_bad_week_id(client):
    response = client.get("/api/games?week_id=abc")
    assert response.status_code == 400
    assert response.get_json()["code"] == "VALIDATION_ERROR"


def test_game_detail_includes_teams_and_week(client, game):
    data = client.get(f"/api/games/{game.id}").get_json()

    assert data["home_team"]["abbreviation"] == "DEN"
    assert data["away_team"]["abbreviation"] == "KC"
    assert data["week"]["week_number"] == 1
    assert data["status"] == "scheduled"


def test_game_detail_not_found(client):
    response = client.get("/api/games/999")
    assert response.status_code == 404
    assert response.get_json()["code"] == "NOT_FOUND"


def test_admin_finalizes_result(
    client, login, admin, game, teams, make_user, make_league, make_pick
):
    home, _ = teams
    player = make_user("alice")
    league = make_league(player)
    make_pick(league, player, game, home, "under")
    login(admin)

    response = client.put(
        f"/api/games/{game.id}/result",
        json={"home_score": 28, "away_score": 21, "is_final": True},
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["is_final"] is True
    assert data["winner_team_id"] == home.id
    assert data["home_team"]["id"] == home.id
    assert data["week"]["id"] == game.week_id
    assert Pick.query.filter_by(game_id=game.id).one().points_earned == 2


def test_failed_pick_write_rolls_back_result(
    client, login, admin, game, teams, make_user, make_league, make_pick, db, monkeypatch
):
    home, _ = teams
    player = make_user("alice")
    pick = make_pick(make_league(player), player, game, home, "under")
    game_id, pick_id = game.id, pick.id

    def failing_persist(self, pick):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(PickScorer, "_persist", failing_persist)
    login(admin)

    response = client.put(
        f"/api/games/{game_id}/result",
        json={"home_score": 28, "away_score": 21, "is_final": True},
    )

    assert response.status_code == 500
    assert response.get_json()["code"] == "PERSISTENCE_ERROR"
    db.session.expire_all()
    stored = db.session.get(Game, game_id)
    assert stored.is_final is False
    assert stored.home_score is None
    assert db.session.get(Pick, pick_id).spread_correct is None


def test_result_requires_login(client, game):
    response = client.put(
        f"/api/games/{game.id}/result",
        json={"home_score": 1, "away_score": 0, "is_final": True},
    )
    assert response.status_code == 401


def test_result_requires_admin(client, login, make_user, game):
    login(make_user("alice"))

    response = client.put(
        f"/api/games/{game.id}/result",
        json={"home_score": 1, "away_score": 0, "is_final": True},
    )

    assert response.status_code == 403
    assert response.get_json()["code"] == "FORBIDDEN"


def test_result_for_missing_game(client, login, admin):
    login(admin)
    response = client.put(
        "/api/games/404/result",
        json={"home_score": 1, "away_score": 0, "is_final": True},
    )
    assert response.status_code == 404


def test_final_result_without_scores(client, login, admin, game, db):
    login(admin)

    response = client.put(f"/api/games/{game.id}/result", json={"is_final": True})

    assert response.status_code == 400
    body = response.get_json()
    assert body["code"] == "VALIDATION_ERROR"
    assert set(body["details"]) == {"home_score", "away_score"}
    assert db.session.get(Game, game.id).is_final is False


def test_result_rejects_scores_over_max(client, login, admin, game):
    login(admin)
    response = client.put(
        f"/api/games/{game.id}/result",
        json={"home_score": 500, "away_score": 0, "is_final": True},
    )
    assert response.status_code == 400
    assert "home_score" in response.get_json()["details"]


def test_result_rejects_non_json_body(client, login, admin, game):
    login(admin)
    response = client.put(f"/api/games/{game.id}/result", data="nope")
    assert response.status_code == 400


def test_security_headers(client):
    response = client.get("/api/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "no-store" in response.headers["Cache-Control"]
