# storefront/utils/logging.py
import logging
import sys

from storefront.utils.settings import LOG_LEVEL

logger = logging.getLogger("storefront")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)

# no duplicates through uvicorn's root handler
logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Child of the `storefront` logger, e.g. get_logger(__name__)."""
    if not name:
        return logger
    if name.startswith("storefront."):
        name = name[len("storefront."):]
    return logger.getChild(name)
