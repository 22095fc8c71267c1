
"""Console and rotating-file sinks for the stockcast logs."""
import sys
from pathlib import Path

from loguru import logger

LOG_FILE_PATTERN = "stockcast_{time:YYYY-MM-DD}.log"


def setup_logger(log_dir: str = "logs", console_level: str = "INFO") -> logger:
    """Replace the default sink with a stderr sink and a daily log file."""
    logger.remove()

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # e.g. logs/stockcast_2026-02-08.log
    log_file = log_path / LOG_FILE_PATTERN

    logger.add(
        sys.stderr,
        level=console_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    logger.add(
        log_file,
        level="DEBUG",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        format=(
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
            "{name}:{function}:{line} - {message}"
        ),
        enqueue=True,
        encoding="utf-8",
    )

    return logger
