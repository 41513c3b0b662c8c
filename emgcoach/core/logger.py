"""Logger configuration for the emgcoach decision core.

Core modules only emit through ``loguru.logger`` with a ``[TAG]`` prefix and
keyword context (``at_seconds``, ``zone``, ...). Sinks belong to the caller;
the CLI sets them up once per invocation.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    serialize: bool = False,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure console output and an optional session log file.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only console logging.
        serialize: Write the file as JSON lines, keyword context included,
            so replayed sessions can be analysed offline
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
    """
    logger.remove()

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            serialize=serialize,
            rotation=rotation,
            retention=retention,
            diagnose=False,
            encoding="utf-8",
        )

    logger.debug("[LOGGING] Sinks configured", level=level, log_file=log_file, serialize=serialize)
