"""
Validation helpers for JSON payloads and query parameters.

Every helper collects field-level messages and raises a single
ValidationError carrying them as details.
"""

from mountaintop.errors import ValidationError

DEFAULT_MAX_SCORE = 200


def _is_int(value):
    # bool is a subclass of int but never a valid score
    return isinstance(value, int) and not isinstance(value, bool)


def validate_game_result(home_score, away_score, is_final, max_score=DEFAULT_MAX_SCORE):
    """Validate a game result before any mutation"""
    details = {}

    if is_final:
        if home_score is None:
            details["home_score"] = "Home score is required when marking game as final"
        if away_score is None:
            details["away_score"] = "Away score is required when marking game as final"

    for field, label, value in (
        ("home_score", "Home score", home_score),
        ("away_score", "Away score", away_score),
    ):
        if value is None or field in details:
            continue
        if not _is_int(value):
            details[field] = f"{label} must be an integer"
        elif value < 0:
            details[field] = f"{label} cannot be negative"
        elif value > max_score:
            details[field] = f"{label} must be less than or equal to {max_score}"

    if details:
        raise ValidationError("Validation failed", details)


def parse_game_result(payload, max_score=DEFAULT_MAX_SCORE):
    """
    Extract and validate ``{home_score, away_score, is_final}``.

    Returns:
        tuple of (home_score, away_score, is_final)
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    is_final = payload.get("is_final", False)
    if not isinstance(is_final, bool):
        raise ValidationError(
            "Validation failed", {"is_final": "is_final must be a boolean"}
        )

    home_score = payload.get("home_score")
    away_score = payload.get("away_score")
    validate_game_result(home_score, away_score, is_final, max_score=max_score)
    return home_score, away_score, is_final


def parse_optional_id(value, name):
    """Parse an optional positive integer id from a query string value"""
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {name} parameter", {name: f"{name} must be an integer"}
        )
    if parsed <= 0:
        raise ValidationError(
            f"Invalid {name} parameter", {name: f"{name} must be positive"}
        )
    return parsed


def form_errors_to_details(errors):
    """Flatten WTForms errors ({field: [messages]}) into {field: message}"""
    return {field: messages[0] for field, messages in errors.items() if messages}


def parse_required_id(value, name):
    parsed = parse_optional_id(value, name)
    if parsed is None:
        raise ValidationError(
            f"Missing {name} parameter", {name: f"{name} is required"}
        )
    return parsed
