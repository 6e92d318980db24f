# catalog/core/logging.py
import logging
import sys
import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Driver loggers that flood DEBUG output with heartbeats and pool events
NOISY_LOGGERS = ("pymongo", "motor", "asyncio")


def configure_logging(level=logging.INFO, *, stream=None) -> None:
    """Install a single colored stdout handler on the root logger."""
    handler = colorlog.StreamHandler(stream or sys.stdout)
    handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in ("uvicorn.error", "uvicorn.access", "catalog"):
        logging.getLogger(name).setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
