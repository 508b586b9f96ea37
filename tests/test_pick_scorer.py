import pytest

from mountaintop.errors import NotFoundError
from mountaintop.models import Pick
from mountaintop.services.scoring import PickScorer


@pytest.fixture
def players(make_user, make_league):
    alice = make_user("alice")
    bob = make_user("bob")
    league = make_league(alice, members=[bob])
    return league, alice, bob


def _set_result(db, game, home_score, away_score):
    game.apply_result(home_score, away_score, True)
    db.session.commit()


def test_scores_every_pick_for_game(db, game, teams, players, make_pick):
    home, away = teams
    league, alice, bob = players
    alice_pick = make_pick(league, alice, game, home, "under")
    bob_pick = make_pick(league, bob, game, away, "over")
    _set_result(db, game, 28, 21)

    scored = PickScorer(db.session).score_game(game.id)
    db.session.commit()

    assert scored == 2
    alice_pick = db.session.get(Pick, alice_pick.id)
    bob_pick = db.session.get(Pick, bob_pick.id)
    assert (alice_pick.spread_correct, alice_pick.over_under_correct) == (True, True)
    assert alice_pick.points_earned == 2
    assert (bob_pick.spread_correct, bob_pick.over_under_correct) == (False, False)
    assert bob_pick.points_earned == 0


def test_rescoring_is_idempotent(db, game, teams, players, make_pick):
    home, _ = teams
    league, alice, _ = players
    pick = make_pick(league, alice, game, home, "over")
    _set_result(db, game, 31, 24)

    game_id, pick_id = game.id, pick.id
    scorer = PickScorer(db.session)

    def score_and_reload():
        scorer.score_game(game_id)
        db.session.commit()
        db.session.expire_all()
        stored = db.session.get(Pick, pick_id)
        return (stored.spread_correct, stored.over_under_correct, stored.points_earned)

    first = score_and_reload()
    second = score_and_reload()

    assert first == second == (True, True, 2)
    assert Pick.query.filter_by(game_id=game_id).count() == 1


def test_tie_makes_every_spread_pick_wrong(db, game, teams, players, make_pick):
    home, away = teams
    league, alice, bob = players
    make_pick(league, alice, game, home, "under")
    make_pick(league, bob, game, away, "under")
    _set_result(db, game, 17, 17)

    PickScorer(db.session).score_game(game.id)

    picks = Pick.query.filter_by(game_id=game.id).all()
    assert game.winner_team_id is None
    assert all(p.spread_correct is False for p in picks)
    assert all(p.points_earned == 1 for p in picks)


def test_no_scores_is_a_noop(db, game, teams, players, make_pick):
    home, _ = teams
    league, alice, _ = players
    pick = make_pick(league, alice, game, home)

    assert PickScorer(db.session).score_game(game.id) == 0
    assert pick.spread_correct is None
    assert pick.points_earned == 0


def test_no_picks_returns_zero(db, game):
    _set_result(db, game, 10, 3)
    assert PickScorer(db.session).score_game(game.id) == 0


def test_missing_game_raises_not_found(db):
    with pytest.raises(NotFoundError):
        PickScorer(db.session).score_game(999)


def test_unscored_game_ids_lists_final_games_with_pending_picks(
    db, week, make_game, teams, players, make_pick
):
    home, _ = teams
    league, alice, _ = players
    final_game = make_game(week)
    open_game = make_game(week)
    make_pick(league, alice, final_game, home)
    make_pick(league, alice, open_game, home)
    _set_result(db, final_game, 21, 14)

    scorer = PickScorer(db.session)
    assert scorer.unscored_game_ids() == [final_game.id]

    scorer.score_games([final_game.id])
    assert scorer.unscored_game_ids() == []
