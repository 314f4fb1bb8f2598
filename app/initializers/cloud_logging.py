import logging
import sys

from google.cloud import logging as gcp_logging

from app.core.config import settings


# Client libraries that log every RPC at INFO
NOISY_LOGGERS = ("google.auth", "google.api_core", "urllib3")


def setup_logging(level: str | None = None) -> bool:
    """Send enrollment logs to Cloud Logging, or to stdout when it is unavailable.

    Returns True when Cloud Logging was attached.
    """
    log_level = logging.getLevelName((level or settings.LOG_LEVEL).upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    try:
        gcp_logging.Client().setup_logging(log_level=log_level)
        cloud_enabled = True
    except Exception as e:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)],
        )
        logging.getLogger(__name__).info(f"Cloud Logging unavailable ({e}), logging to stdout")
        cloud_enabled = False

    logging.getLogger().setLevel(log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return cloud_enabled
