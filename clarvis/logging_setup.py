"""Logging bootstrap for the hook process.

The hook runs inside Claude Code, so nothing may be printed to stdout.
By default only warnings reach stderr; ``[debug] enabled = true`` adds a
size-rotated debug log under the XDG cache directory.
"""

import logging
import logging.handlers
from pathlib import Path

from clarvis.config import DEFAULT_LOG_PATH, DebugConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_PACKAGE_LOGGER = "clarvis"


def configure_logging(debug: DebugConfig | None = None) -> Path | None:
    """Configure the ``clarvis`` logger from the ``[debug]`` table.

    Returns the debug log path when file logging was enabled. Calling it
    again replaces the handlers installed by a previous call.
    """
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(stderr_handler)

    if debug is None or not debug.enabled:
        package_logger.setLevel(logging.WARNING)
        return None

    log_path = Path(debug.log_path).expanduser() if debug.log_path else DEFAULT_LOG_PATH
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=int(debug.max_size_mb * 1024 * 1024),
            backupCount=1,
            encoding="utf-8",
        )
    except OSError as exc:
        package_logger.setLevel(logging.WARNING)
        package_logger.warning("Cannot open debug log %s: %s", log_path, exc)
        return None

    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(file_handler)
    package_logger.setLevel(logging.DEBUG)
    return log_path
