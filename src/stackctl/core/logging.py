import logging

from .config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure stackctl logging based on settings.

    The format includes timestamp, log level, logger name, and message. Output
    goes to stderr so it never mixes with the wrapped tools' stdout.
    """
    log_level_name = settings.log_level.upper()
    level = getattr(logging, log_level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    # httpx logs every request at INFO; keep it behind our own level.
    for logger_name in ("httpx", "httpcore"):
        logging.getLogger(logger_name).setLevel(max(level, logging.WARNING))
