"""
Logging setup for dungen.

Library modules only ask for a logger through get_logger(); nothing is
written anywhere until an application (the CLI, a game, a test) calls
setup_logging() once.

    from dungen.logging_config import setup_logging
    setup_logging("logs")

After that every dungen.* logger writes DEBUG and up to <log_dir>/debug.log,
rotated at 10 MB, and WARNING and up to stderr.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # Rotate at 10 MB
BACKUP_COUNT = 5
ROOT_LOGGER_NAME = "dungen"

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-32s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_banner_written = False


def _make_file_handler(log_path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def _make_console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Route dungen logging to a rotating file and stderr.

    Calling it again replaces the handlers from the previous call, so tests
    and long-lived hosts can point logging somewhere new.

    Args:
        log_dir: Directory for debug.log, created if missing
        log_level: Minimum level written to the file
        console_level: Minimum level written to stderr

    Returns:
        Path to the log file
    """
    global _banner_written

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE_NAME

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)

    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    package_logger.addHandler(_make_file_handler(log_path, log_level))
    package_logger.addHandler(_make_console_handler(console_level))

    if not _banner_written:
        package_logger.info("-" * 72)
        package_logger.info(f"dungen logging started {datetime.now().isoformat()} -> {log_path.absolute()}")
        package_logger.info("-" * 72)
        _banner_written = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the dungen namespace (pass __name__)."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_attempt(
    logger: logging.Logger,
    attempt: int,
    max_attempts: int,
    status: str,
    details: str | None = None,
) -> None:
    """Log the outcome of one generation attempt."""
    details_str = f" | {details}" if details else ""
    logger.info(f"ATTEMPT {attempt}/{max_attempts} | {status}{details_str}")


def log_step(
    logger: logging.Logger,
    iteration: int,
    position: tuple[int, int],
    tile: str,
    details: str | None = None,
) -> None:
    """Log a single collapse decision."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STEP {iteration:05d} | COLLAPSE | ({position[0]}, {position[1]}) -> {tile}{details_str}")


def log_backtrack(
    logger: logging.Logger,
    iteration: int,
    position: tuple[int, int],
    depth: int,
    details: str | None = None,
) -> None:
    """Log a snapshot restore after a failed propagation."""
    details_str = f" | {details}" if details else ""
    logger.debug(
        f"STEP {iteration:05d} | BACKTRACK | ({position[0]}, {position[1]}) | stack={depth}{details_str}"
    )


def log_constraint(
    logger: logging.Logger,
    constraint: str,
    phase: str,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log constraint initialization, propagation, or validation."""
    status = "OK" if success else "FAILED"
    details_str = f" | {details}" if details else ""
    logger.debug(f"CONSTRAINT | {constraint} | {phase} | {status}{details_str}")
