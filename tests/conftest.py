from datetime import datetime, timedelta, timezone

import pytest

from mountaintop import create_app
from mountaintop import db as _db
from mountaintop.models import (
    Game,
    League,
    LeagueMembership,
    Pick,
    Season,
    Team,
    User,
    Week,
)


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Log a user into the test client through the flask-login session"""

    def _login(user):
        with client.session_transaction() as sess:
            sess["_user_id"] = str(user.id)
            sess["_fresh"] = True
        return client

    return _login


@pytest.fixture
def make_user(db):
    def _make_user(username, is_admin=False, is_active=True, password="password123"):
        user = User(
            username=username,
            email=f"{username}@example.com",
            display_name=username.title(),
            is_admin=is_admin,
            is_active=is_active,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_league(db):
    def _make_league(owner, name="Mountaintop", members=()):
        league = League(name=name, owner_id=owner.id)
        db.session.add(league)
        db.session.flush()
        db.session.add(
            LeagueMembership(league_id=league.id, user_id=owner.id, role="owner")
        )
        for member in members:
            db.session.add(LeagueMembership(league_id=league.id, user_id=member.id))
        db.session.commit()
        return league

    return _make_league


@pytest.fixture
def make_season(db):
    def _make_season(year=2024, league=None, is_active=False):
        season = Season(
            year=year,
            name=f"{year} Regular Season",
            league_id=league.id if league else None,
            is_active=is_active,
        )
        db.session.add(season)
        db.session.commit()
        return season

    return _make_season


@pytest.fixture
def make_week(db):
    def _make_week(season, week_number=1, status="picking", pick_deadline=None):
        week = Week(
            season_id=season.id,
            week_number=week_number,
            status=status,
            pick_deadline=pick_deadline,
        )
        db.session.add(week)
        db.session.commit()
        return week

    return _make_week


@pytest.fixture
def teams(db):
    home = Team(name="Denver Broncos", abbreviation="DEN", conference="AFC")
    away = Team(name="Kansas City Chiefs", abbreviation="KC", conference="AFC")
    db.session.add_all([home, away])
    db.session.commit()
    return home, away


@pytest.fixture
def make_game(db, teams):
    def _make_game(week, total=50.5, game_time=None, home=None, away=None):
        home_team, away_team = teams
        game = Game(
            week_id=week.id,
            home_team_id=(home or home_team).id,
            away_team_id=(away or away_team).id,
            game_time=game_time or datetime.now(timezone.utc) + timedelta(days=2),
            home_spread=-3.5,
            total=total,
        )
        db.session.add(game)
        db.session.commit()
        return game

    return _make_game


@pytest.fixture
def make_pick(db):
    def _make_pick(league, user, game, team, side="over", confidence=None):
        pick = Pick(
            league_id=league.id,
            user_id=user.id,
            game_id=game.id,
            picked_team_id=team.id,
            picked_over_under=side,
            confidence=confidence,
        )
        db.session.add(pick)
        db.session.commit()
        return pick

    return _make_pick


@pytest.fixture
def week(make_season, make_week):
    return make_week(make_season(2024))


@pytest.fixture
def game(make_game, week):
    return make_game(week)
