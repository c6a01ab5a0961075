"""loguru setup shared by the Streamlit app and the console status script."""

import sys
from pathlib import Path

from loguru import logger

_configured = False


def configure_logging(level: str = "INFO", log_dir: Path | None = None) -> None:
    """Install the stderr sink and, optionally, a daily-rotated file sink.

    Streamlit re-executes the app script on every rerun, so only the first
    call has any effect.
    """
    global _configured
    if _configured:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
    )
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / "{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="7 days",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            enqueue=True,
        )

    _configured = True
    logger.debug("Logger initialized (level={})", level)
