"""
Logging setup for Mountaintop Pick'em

Console output plus three rotating files under LOG_DIR:
    mountaintop.log  everything at LOG_LEVEL
    errors.log       ERROR and above, with source locations
    results.log      result finalization and pick scoring only
"""

import logging
import logging.handlers
import os

from flask import has_request_context, request

REQUEST_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s "
    "[%(method)s %(url)s] [%(remote_addr)s]"
)
ERROR_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s "
    "[%(pathname)s:%(lineno)d] [%(method)s %(url)s]"
)
RESULTS_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers whose records also go to results.log
RESULTS_LOGGERS = ("mountaintop.services.results", "mountaintop.services.scoring")


class RequestContextFilter(logging.Filter):
    """Attach method, url and client address; 'N/A' outside a request"""

    def filter(self, record):
        if has_request_context():
            record.url = request.url
            record.remote_addr = request.remote_addr
            record.method = request.method
        else:
            record.url = record.remote_addr = record.method = "N/A"
        return True


class ColoredFormatter(logging.Formatter):
    """Colors the level name for terminal output"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if not color:
            return super().format(record)

        # Copy so file handlers still see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _rotating_handler(path, level, fmt, max_mb, backups):
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_mb * 1024 * 1024, backupCount=backups
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    handler.addFilter(RequestContextFilter())
    return handler


def _console_handler(level, debug):
    handler = logging.StreamHandler()
    handler.setLevel(level)
    if debug:
        handler.setFormatter(
            ColoredFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s "
                "[%(filename)s:%(lineno)d]",
                datefmt="%H:%M:%S",
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt=DATE_FORMAT,
            )
        )
    return handler


def setup_logging(app):
    """
    Configure the root logger from the app's LOG_* settings.

    Existing root handlers are replaced, so calling this for every app the
    factory builds does not duplicate output.
    """
    log_level = logging.getLevelName(app.config.get("LOG_LEVEL", "INFO").upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for name in RESULTS_LOGGERS:
        results_logger = logging.getLogger(name)
        # Result lines reach results.log whatever LOG_LEVEL is
        results_logger.setLevel(logging.INFO)
        for handler in results_logger.handlers[:]:
            results_logger.removeHandler(handler)

    if app.config.get("LOG_TO_CONSOLE", True):
        root_logger.addHandler(_console_handler(log_level, app.debug))

    if app.config.get("LOG_TO_FILE", True):
        log_dir = app.config.get("LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)

        root_logger.addHandler(
            _rotating_handler(
                os.path.join(log_dir, "mountaintop.log"),
                log_level,
                REQUEST_FORMAT,
                max_mb=10,
                backups=5,
            )
        )
        root_logger.addHandler(
            _rotating_handler(
                os.path.join(log_dir, "errors.log"),
                logging.ERROR,
                ERROR_FORMAT,
                max_mb=5,
                backups=3,
            )
        )

        results_handler = _rotating_handler(
            os.path.join(log_dir, "results.log"),
            logging.INFO,
            RESULTS_FORMAT,
            max_mb=5,
            backups=10,
        )
        for name in RESULTS_LOGGERS:
            logging.getLogger(name).addHandler(results_handler)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("flask_limiter").setLevel(logging.WARNING)
    if not app.config.get("SQLALCHEMY_ECHO"):
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    app.logger.info(f"Logging configured - Level: {logging.getLevelName(log_level)}")
