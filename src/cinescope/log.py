"""Logging setup for CineScope."""

from pathlib import Path

from loguru import logger

DEFAULT_LOG_FILE = "~/.cinescope.log"


def setup_logging(log_file: str | None = DEFAULT_LOG_FILE, level: str = "INFO") -> None:
    """Route loguru output to a file.

    The default stderr sink is removed because anything written to the
    terminal while the TUI is running ends up drawn over the screen.
    """
    logger.remove()
    if not log_file:
        return

    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(log_path, level=level, rotation="1 MB", retention=3, enqueue=False)
    logger.info(f"Logging to {log_path} at level {level}")
