"""Logging configuration for ifmeter."""

import logging
import os
import sys

DEFAULT_LEVEL = logging.WARNING


def configure_logging() -> int:
    """Configure application-wide logging and return the level in effect.

    Respects IFMETER_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    Default is WARNING so diagnostics stay out of the report tables;
    unknown values fall back to the default. Logs go to stderr.

    Examples:
        # Trace every tick of the peak tracker
        $ IFMETER_LOG_LEVEL=DEBUG python -m ifmeter --sampler mock
    """
    log_level_str = os.environ.get("IFMETER_LOG_LEVEL", "").upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_level_map.get(log_level_str, DEFAULT_LEVEL)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured: level=%s", logging.getLevelName(log_level))
    return log_level
