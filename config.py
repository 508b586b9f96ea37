"""
Settings for Mountaintop Pick'em

Values come from the environment, with a ``.env`` file next to this module
loaded first. ``create_app`` picks a class from ``config`` by name:

    development  SQLite file, debug on, optional SQL echo
    production   same settings, warns when the signing keys are generated
    testing      in-memory SQLite, no CSRF, no rate limits, no log output

Game results are checked against MAX_SCORE. The login endpoint is rate
limited through Flask-Limiter using RATELIMIT_STORAGE_URI. LOG_* settings
are read by mountaintop.utils.logging_config.setup_logging, and
SLOW_FUNCTION_THRESHOLD by the scoring and leaderboard timers.
"""

import os
import secrets
import warnings

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


def _env_flag(name, default):
    return os.environ.get(name, default).lower() == "true"


def _signing_key(name, message):
    """Read a signing key, or generate a throwaway one and warn"""
    value = os.environ.get(name)
    if value:
        return value
    warnings.warn(message, UserWarning)
    return secrets.token_urlsafe(32)


class Config:
    # Session cookies and CSRF tokens are signed with these
    SECRET_KEY = _signing_key(
        "SECRET_KEY",
        "SECRET_KEY not set! Using auto-generated key. "
        "Logins will not survive an app restart.",
    )
    WTF_CSRF_SECRET_KEY = _signing_key(
        "WTF_CSRF_SECRET_KEY",
        "WTF_CSRF_SECRET_KEY not set! Using auto-generated key.",
    )

    def __init__(self):
        self.SQLALCHEMY_DATABASE_URI = self._build_database_uri()

    def _build_database_uri(self):
        """
        DATABASE_URL wins when set. Otherwise DB_TYPE=postgresql builds a
        psycopg URI from the DB_* variables, and anything else uses the
        mountaintop.db SQLite file.
        """
        database_url = os.environ.get("DATABASE_URL")
        if database_url:
            return database_url

        if os.environ.get("DB_TYPE", "sqlite").lower() != "postgresql":
            return "sqlite:///" + os.path.join(basedir, "mountaintop.db")

        host = os.environ.get("DB_HOST") or "localhost"
        port = os.environ.get("DB_PORT") or "5432"
        name = os.environ.get("DB_NAME") or "mountaintop_db"
        user = os.environ.get("DB_USER") or "mountaintop"
        password = os.environ.get("DB_PASSWORD") or "mountaintop"
        return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{name}"

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upper bound for home_score and away_score on PUT /api/games/<id>/result
    # and `manage.py game finalize`
    MAX_SCORE = int(os.environ.get("MAX_SCORE") or 200)

    # Flask-Limiter; POST /auth/login allows 10 attempts a minute per client IP
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "True")
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    # mountaintop.log, errors.log and results.log are written under LOG_DIR
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_TO_CONSOLE = _env_flag("LOG_TO_CONSOLE", "True")
    LOG_TO_FILE = _env_flag("LOG_TO_FILE", "True")
    LOG_DIR = os.environ.get("LOG_DIR", "logs")
    # Seconds before a scoring or leaderboard call is logged as slow
    SLOW_FUNCTION_THRESHOLD = float(os.environ.get("SLOW_FUNCTION_THRESHOLD", "1.0"))

    FLASK_ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = FLASK_ENV == "development"
    TESTING = False


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_ECHO = _env_flag("SQLALCHEMY_ECHO", "False")


class ProductionConfig(Config):
    """Same settings as development minus debug, louder about missing keys"""

    DEBUG = False

    def __init__(self):
        super().__init__()

        for name in ("SECRET_KEY", "WTF_CSRF_SECRET_KEY"):
            if not os.environ.get(name):
                warnings.warn(
                    f"PRODUCTION WARNING: {name} not explicitly set! "
                    "Sessions and CSRF tokens break on every restart.",
                    UserWarning,
                )


class TestingConfig(Config):
    """In-memory database; CSRF, rate limits and log output switched off"""

    DEBUG = False
    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    LOG_TO_FILE = False
    LOG_TO_CONSOLE = False

    def _build_database_uri(self):
        return "sqlite:///:memory:"


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
