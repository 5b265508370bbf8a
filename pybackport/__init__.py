"""
Backport merged pull requests to the release branches named by their labels.
"""
import logging
import sys

LOG_FORMAT = '%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# HTTP chatter from PyGithub, only shown with -vv
NOISY_LOGGERS = ("github", "urllib3")

def setup_logging(verbose: int = 0) -> None:
    """Send log records to stderr; stdout carries the JSON result.

    Args:
        verbose: 0 and 1 log INFO (every git and github call), 2 or more logs DEBUG
    """
    level = logging.DEBUG if verbose >= 2 else logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose >= 2 else logging.WARNING)

setup_logging()

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
