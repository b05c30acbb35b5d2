"""Logging configuration helpers."""

import logging

_LOGGER_NAME = "vendor_live"
_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def configure_logging(log_level: str = "INFO") -> None:
    """Attach one stream handler to the ``vendor_live`` logger.

    Repeated calls only update the level. Unknown level names fall back to INFO.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    # httpx logs every geocoder request at INFO, including the token in the URL.
    logging.getLogger("httpx").setLevel(logging.WARNING)
