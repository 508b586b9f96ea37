import logging

from flask import current_app, jsonify, request
from flask_login import current_user, login_required
from werkzeug.datastructures import ImmutableMultiDict

from mountaintop import db
from mountaintop.errors import NotFoundError, ValidationError
from mountaintop.forms.leagues import JoinLeagueForm
from mountaintop.forms.picks import PickForm
from mountaintop.models import Game, Season, Team, Week
from mountaintop.routes.api import bp
from mountaintop.services.leaderboard import (
    LeaderboardAggregator,
    LeaderboardQuery,
    get_leaderboard,
)
from mountaintop.services.leagues import LeagueService
from mountaintop.services.picks import PickService
from mountaintop.services.results import ResultFinalizer
from mountaintop.utils.decorators import admin_required
from mountaintop.utils.validation import (
    form_errors_to_details,
    parse_game_result,
    parse_optional_id,
    parse_required_id,
)

logger = logging.getLogger(__name__)


def _leaderboard_filters():
    return LeaderboardQuery(
        season_id=parse_optional_id(request.args.get("season_id"), "season_id"),
        league_id=parse_optional_id(request.args.get("league_id"), "league_id"),
    )


@bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@bp.route("/seasons")
def seasons():
    seasons = Season.query.order_by(Season.year.desc(), Season.id).all()
    return jsonify([season.to_dict() for season in seasons])


@bp.route("/weeks")
def weeks():
    """List weeks in order, optionally for a single season"""
    season_id = parse_optional_id(request.args.get("season_id"), "season_id")

    query = Week.query
    if season_id is not None:
        query = query.filter_by(season_id=season_id)
    weeks = query.order_by(Week.season_id, Week.week_number).all()

    return jsonify([week.to_dict() for week in weeks])


@bp.route("/weeks/current")
def current_week():
    season = Season.get_current_season()
    if season is None:
        raise NotFoundError("No active season found")

    week = season.get_current_week()
    if week is None:
        raise NotFoundError("No weeks found", {"season_id": season.id})

    data = week.to_dict()
    data["season"] = season.to_dict()
    return jsonify(data)


@bp.route("/weeks/<int:week_id>/picks")
@login_required
def week_picks(week_id):
    """A league's picks for a week, once picking has closed"""
    league_id = parse_required_id(request.args.get("league_id"), "league_id")
    picks = PickService(db.session).list_for_week(current_user, week_id, league_id)
    return jsonify([pick.to_dict(include_user=True) for pick in picks])


@bp.route("/teams")
def teams():
    teams = Team.query.order_by(Team.name).all()
    return jsonify([team.to_dict() for team in teams])


@bp.route("/games")
def games():
    """List games, optionally for a single week"""
    week_id = parse_optional_id(request.args.get("week_id"), "week_id")

    query = Game.query
    if week_id is not None:
        query = query.filter_by(week_id=week_id)
    games = query.order_by(Game.game_time, Game.id).all()

    return jsonify([game.to_dict() for game in games])


@bp.route("/games/<int:game_id>")
def game_detail(game_id):
    game = db.session.get(Game, game_id)
    if game is None:
        raise NotFoundError(f"Game {game_id} not found", {"game_id": game_id})
    return jsonify(game.to_dict())


@bp.route("/games/<int:game_id>/result", methods=["PUT"])
@admin_required
def game_result(game_id):
    """Record a game result and score its picks"""
    home_score, away_score, is_final = parse_game_result(
        request.get_json(silent=True), max_score=current_app.config["MAX_SCORE"]
    )

    finalizer = ResultFinalizer(
        db.session, max_score=current_app.config["MAX_SCORE"]
    )
    game = finalizer.finalize(game_id, home_score, away_score, is_final)

    logger.info(
        f"Admin {current_user.username} set result for game {game_id}: "
        f"{home_score}-{away_score} final={is_final}"
    )
    return jsonify(game.to_dict())


@bp.route("/leaderboard")
def leaderboard():
    entries = get_leaderboard(db.session, *_leaderboard_filters())
    return jsonify([entry.to_dict() for entry in entries])


@bp.route("/users/<int:user_id>/pick-stats")
@login_required
def user_pick_stats(user_id):
    entry = LeaderboardAggregator(db.session).user_entry(
        user_id, _leaderboard_filters()
    )
    return jsonify(entry.to_dict())


@bp.route("/picks", methods=["GET"])
@login_required
def user_picks():
    """The current user's picks"""
    picks = PickService(db.session).list_for_user(
        current_user.id,
        league_id=parse_optional_id(request.args.get("league_id"), "league_id"),
        week_id=parse_optional_id(request.args.get("week_id"), "week_id"),
    )
    return jsonify([pick.to_dict(include_game=True) for pick in picks])


@bp.route("/picks", methods=["POST"])
@login_required
def submit_pick():
    """Create or update the current user's pick for a game"""
    formdata = None
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        # Nulls mean "not provided"
        formdata = ImmutableMultiDict(
            {key: value for key, value in payload.items() if value is not None}
        )

    form = PickForm(formdata=formdata) if formdata is not None else PickForm()
    if not form.validate():
        raise ValidationError("Invalid pick", form_errors_to_details(form.errors))

    pick, created = PickService(db.session).submit(
        current_user,
        league_id=form.league_id.data,
        game_id=form.game_id.data,
        picked_team_id=form.picked_team_id.data,
        picked_over_under=form.picked_over_under.data,
        confidence=form.confidence.data,
    )
    return jsonify(pick.to_dict()), 201 if created else 200


@bp.route("/leagues")
@login_required
def my_leagues():
    leagues = LeagueService(db.session).list_for_user(current_user)
    return jsonify([league.to_dict() for league in leagues])


@bp.route("/leagues/join", methods=["POST"])
@login_required
def join_league():
    """Join a league by its XXXX-XXXX code"""
    form = JoinLeagueForm()
    if not form.validate_on_submit():
        raise ValidationError(
            "Invalid league code", form_errors_to_details(form.errors)
        )

    league = LeagueService(db.session).join(current_user, form.code.data)
    return jsonify(league.to_dict()), 201
