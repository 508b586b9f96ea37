from datetime import datetime, timedelta, timezone

from mountaintop.models import Team


def test_list_seasons_newest_first(client, make_season):
    make_season(2023)
    current = make_season(2024, is_active=True)

    data = client.get("/api/seasons").get_json()

    assert [season["year"] for season in data] == [2024, 2023]
    assert data[0] == {
        "id": current.id,
        "league_id": None,
        "year": 2024,
        "name": "2024 Regular Season",
        "is_active": True,
    }


def test_list_weeks_for_season(client, make_season, make_week):
    season = make_season(2024)
    other = make_season(2025)
    make_week(season, 2)
    make_week(season, 1)
    make_week(other, 1)

    response = client.get(f"/api/weeks?season_id={season.id}")

    assert response.status_code == 200
    data = response.get_json()
    assert [(w["season_id"], w["week_number"]) for w in data] == [
        (season.id, 1),
        (season.id, 2),
    ]
    assert len(client.get("/api/weeks").get_json()) == 3


def test_list_weeks_rejects_bad_season_id(client):
    response = client.get("/api/weeks?season_id=zero")
    assert response.status_code == 400
    assert "season_id" in response.get_json()["details"]


def test_current_week_is_earliest_in_play(client, make_season, make_week):
    season = make_season(2024, is_active=True)
    make_week(season, 1, status="finished")
    scoring = make_week(season, 2, status="scoring")
    make_week(season, 3, status="picking")
    make_week(season, 4, status="creating")

    response = client.get("/api/weeks/current")

    assert response.status_code == 200
    data = response.get_json()
    assert data["id"] == scoring.id
    assert data["season"]["id"] == season.id


def test_current_week_falls_back_to_latest(client, make_season, make_week):
    season = make_season(2024, is_active=True)
    make_week(season, 1, status="finished")
    last = make_week(season, 2, status="finished")

    assert client.get("/api/weeks/current").get_json()["id"] == last.id


def test_current_week_without_active_season(client, make_season):
    make_season(2024)

    response = client.get("/api/weeks/current")

    assert response.status_code == 404
    assert response.get_json()["error"] == "No active season found"


def test_current_week_without_weeks(client, make_season):
    make_season(2024, is_active=True)
    assert client.get("/api/weeks/current").status_code == 404


def test_week_lock_follows_status_and_deadline(make_season, make_week):
    season = make_season(2024)
    open_week = make_week(season, 1)
    closed = make_week(season, 2, status="scoring")
    past_deadline = make_week(
        season, 3, pick_deadline=datetime.now(timezone.utc) - timedelta(minutes=1)
    )

    assert open_week.is_open_for_picks()
    assert not closed.is_open_for_picks()
    assert not past_deadline.is_open_for_picks()


def test_list_teams_by_name(client, db, teams):
    db.session.add(Team(name="Arizona Cardinals", abbreviation="ARI"))
    db.session.commit()

    data = client.get("/api/teams").get_json()

    assert [team["abbreviation"] for team in data] == ["ARI", "DEN", "KC"]
    assert data[1]["conference"] == "AFC"
