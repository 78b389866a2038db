"""
Console output helpers.

Progress messages for the CLI go to stderr through the "gants" logger.
The verbosity level picks how much is shown:

    0  errors and warnings only
    1  verbose messages (-v)
    2  debug messages (-vv)

Explanations (-e) describe what each step does for readers new to Tor.
"""

import logging
import sys

logger = logging.getLogger("gants")

_explain = False


def configure(explain: bool = False, verbose: bool = False, debug: bool = False) -> None:
    """
    Configure console output.

    Args:
        explain: Print explanations of each step
        verbose: Show verbose messages
        debug: Show debug messages
    """
    global _explain  # pylint: disable=global-statement
    _explain = explain

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)


def explain(message: str) -> None:
    """Print an explanation of the current step if enabled."""
    if _explain:
        print(f"[explain] {message}", file=sys.stderr)


def verbose(message: str) -> None:
    """Print a message shown with -v."""
    logger.info(message)


def debug(message: str) -> None:
    """Print a message shown with -vv."""
    logger.debug(message)
