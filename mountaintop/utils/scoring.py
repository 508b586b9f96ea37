"""
Scoring rules for Mountaintop Pick'em

Pure functions that decide a single pick's outcome from a final game
result. Persisting the outcome is the job of PickScorer in
mountaintop/services/scoring.py; aggregation lives in
mountaintop/services/leaderboard.py.

Each pick is worth up to 2 points:
    +1 if the picked team won the game (a tie has no winner)
    +1 if the over/under side was right (a push on the line scores nothing)
"""

from collections import namedtuple

PickResult = namedtuple(
    "PickResult", ["spread_correct", "over_under_correct", "points_earned"]
)


def is_spread_correct(winner_team_id, picked_team_id):
    """True iff the game has a winner and it is the picked team"""
    return winner_team_id is not None and picked_team_id == winner_team_id


def is_over_under_correct(home_score, away_score, total_line, picked_side):
    """
    Compare the combined final score against the total line.

    Any side other than "over" or "under" is simply incorrect.
    """
    actual_total = float(home_score + away_score)

    if picked_side == "over":
        return actual_total > total_line
    if picked_side == "under":
        return actual_total < total_line
    return False


def calculate_points(spread_correct, over_under_correct):
    return int(bool(spread_correct)) + int(bool(over_under_correct))


def score_pick(game, pick):
    """
    Score one pick against a game that has both final scores.

    Args:
        game: Game with home_score, away_score, total and winner_team_id set
        pick: Pick with picked_team_id and picked_over_under

    Returns:
        PickResult
    """
    spread_correct = is_spread_correct(game.winner_team_id, pick.picked_team_id)
    over_under_correct = is_over_under_correct(
        game.home_score, game.away_score, game.total, pick.picked_over_under
    )
    return PickResult(
        spread_correct,
        over_under_correct,
        calculate_points(spread_correct, over_under_correct),
    )


def win_percentage(total_points, total_picks):
    """Share of available points earned; 0.0 when nothing was picked"""
    if not total_picks:
        return 0.0
    return total_points / (total_picks * 2)
