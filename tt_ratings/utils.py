"""
Shared utilities for the ratings engine.

Logging setup, CSV output helpers, and the small numeric/formatting helpers
used by the statistics and report modules.
"""

import logging
import os
import tempfile
from pathlib import Path

from tt_ratings.config import (
    LOG_FORMAT,
    LOG_LEVEL,
    MATCH_TYPES,
    OUTPUT_FOLDER,
    PACKAGE_LOGGER,
    ConfigurationError,
)


# --- Logging Setup ---
def resolve_log_level(level) -> int:
    """
    Turn a level name or number into a logging level.

    Raises:
        ConfigurationError: If a name is not a standard level
    """
    if level is None:
        level = LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(name: str | None = None, level=None) -> logging.Logger:
    """
    Return a logger below the package logger.

    The stream handler lives on the package logger and is attached once;
    module loggers propagate to it. Names outside the package (such as
    "__main__") are nested under it.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Level name or number for this logger; the package logger
               defaults to TT_LOG_LEVEL (INFO when unset)

    Returns:
        Configured logger instance
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        package_logger.addHandler(handler)
        package_logger.setLevel(resolve_log_level(None))

    if not name or name == PACKAGE_LOGGER:
        logger = package_logger
    elif name.startswith(f"{PACKAGE_LOGGER}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{PACKAGE_LOGGER}.{name}")

    if level is not None:
        logger.setLevel(resolve_log_level(level))
    return logger


# --- Numeric Helpers ---
def safe_ratio(numerator, denominator) -> float | None:
    """Divide, returning None (undefined) instead of raising on a zero denominator."""
    if not denominator:
        return None
    return numerator / denominator


def percentage(numerator, denominator, digits: int = 1) -> float | None:
    """Percentage rounded for display; None when the denominator is zero."""
    ratio = safe_ratio(numerator, denominator)
    if ratio is None:
        return None
    return round(ratio * 100, digits)


def format_delta(delta: float | None, digits: int = 0) -> str:
    """Render a rating change as "+12" / "-8" / "0"; empty string when undefined."""
    if delta is None:
        return ""
    rounded = round(delta, digits)
    if digits == 0:
        rounded = int(rounded)
    if rounded > 0:
        return f"+{rounded}"
    if rounded < 0:
        return f"{rounded}"
    return "0"


# --- File Operations ---
def cleanup_old_files(pattern: str, keep_file: Path | None = None, folder: Path | None = None) -> list[Path]:
    """
    Remove superseded report files matching pattern.

    Args:
        pattern: Glob pattern of one report series (e.g., "leaderboard_singles_*.csv")
        keep_file: The report just written; never removed
        folder: Folder to search in (default: OUTPUT_FOLDER)

    Returns:
        Deleted paths, oldest stamp first
    """
    logger = setup_logging(__name__)
    target_folder = Path(folder or OUTPUT_FOLDER)
    keep = keep_file.resolve() if keep_file else None
    deleted = []

    for f in sorted(target_folder.glob(pattern)):
        if not f.is_file() or f.resolve() == keep:
            continue
        try:
            f.unlink()
        except OSError as e:
            logger.warning(f"Could not delete {f}: {e}")
            continue
        deleted.append(f)

    if deleted:
        logger.debug(f"Removed {len(deleted)} superseded report(s) matching {pattern}")
    return deleted


def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """
    Write a DataFrame to CSV so readers never see a half-written report.

    The frame goes to a temporary file in the destination folder, which
    then replaces path in one rename.

    Args:
        df: pandas DataFrame to write
        path: Destination path for the CSV file
        **kwargs: Additional arguments to pass to df.to_csv()
    """
    logger = setup_logging(__name__)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}_", suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', newline='', encoding='utf-8') as tmp:
            df.to_csv(tmp, **kwargs)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.debug(f"Wrote {len(df)} rows to {path}")


# --- Validation ---
def validate_match_type(match_type: str | None) -> None:
    """
    Validate an optional match type filter.

    Raises:
        ValueError: If match_type is set and not a known type
    """
    if match_type is not None and match_type not in MATCH_TYPES:
        raise ValueError(
            f"Invalid match type: '{match_type}'. "
            f"Allowed values: {', '.join(sorted(MATCH_TYPES))}"
        )


__all__ = [
    # Logging
    'resolve_log_level',
    'setup_logging',
    # Numeric helpers
    'safe_ratio',
    'percentage',
    'format_delta',
    # File operations
    'cleanup_old_files',
    'atomic_write_csv',
    # Validation
    'validate_match_type',
]
