from __future__ import annotations
import logging

DEFAULT_LOG_LEVEL = logging.WARNING


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Configure root logging for the CLI and return the package logger.

    `level` may be a level name ("debug", "INFO") or a numeric level.
    Unknown names fall back to WARNING. Output goes to stderr so it never
    mixes with command results on stdout.
    """
    numeric = DEFAULT_LOG_LEVEL
    if isinstance(level, int):
        numeric = level
    elif isinstance(level, str):
        candidate = getattr(logging, level.upper(), None)
        if isinstance(candidate, int):
            numeric = candidate

    # Reconfigure root handlers to use the selected level and format
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=numeric, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')

    logger = logging.getLogger('kv_lib')
    logger.debug("Log level set to: %s", logging.getLevelName(numeric))
    return logger
