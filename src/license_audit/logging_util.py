from __future__ import annotations

import logging
import os
import sys

_LEVELS = {
    0: logging.WARNING,  # Default: only degraded patterns and fatal errors
    1: logging.INFO,
    2: logging.DEBUG,
}

LOG_LEVEL_ENV = "LICENSE_AUDIT_LOG_LEVEL"


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time.

    Test runners and click.testing swap ``sys.stderr`` between calls, so the
    stream is looked up on every emit instead of captured at setup.
    """

    def __init__(self, level: int = logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(verbosity: int = 0) -> int:
    """
    Configure the ``license_audit`` logger to write to stderr.
    - verbosity comes from repeated -v flags; $LICENSE_AUDIT_LOG_LEVEL raises it.
    - levels are clamped to 0 (warnings), 1 (info) and 2 (debug).
    Returns the normalized level actually used.
    """

    try:
        env_level = int(os.getenv(LOG_LEVEL_ENV, "0"))
    except ValueError:
        env_level = 0
    level = max(verbosity, env_level)
    lvl = 0 if level < 0 else 2 if level > 2 else level

    logger = logging.getLogger("license_audit")
    # reset handlers so repeated CLI invocations in one process don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(_LEVELS[lvl])

    handler = _StderrHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%H:%M:%S"))
    logger.addHandler(handler)
    return lvl
