import os
import sys
import logging

# --------------------------------------------------------
# Unified logger for every repcoach module
# --------------------------------------------------------
LOGGER_NAME = "repcoach"
LEVEL_ENV = "REPCOACH_LOG_LEVEL"


def resolve_level(name):
    """Level number for a level name; unknown names fall back to INFO."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(resolve_level(os.environ.get(LEVEL_ENV, "INFO")))

# Attach a handler only once (module may be re-imported under reload)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            '[%(asctime)s] [%(levelname)s] %(message)s',
            datefmt='%H:%M:%S'
        )
    )
    logger.addHandler(handler)

logger.propagate = False  # uvicorn installs its own root handlers


# --------------------------------------------------------
# Short helpers used by validators, sessions and routes
# --------------------------------------------------------
def log(msg):
    """Info-level shortcut used for rep and milestone events."""
    logger.info(msg)


def debug(msg):
    # Per-frame rejections; silent unless REPCOACH_LOG_LEVEL=DEBUG
    logger.debug(msg)


def warn(msg):
    logger.warning(msg)
