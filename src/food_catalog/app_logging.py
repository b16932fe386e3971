"""Logging configuration helpers."""

import logging

# Logger used by the Supabase/PostgREST HTTP client; it logs every request.
_HTTP_CLIENT_LOGGER = "httpx"


def configure_logging(debug: bool = False) -> None:
    """Configure catalog logging with a single stream handler.

    Per-request HTTP client logs are only kept in debug mode, where every
    bulk page and barcode lookup is worth seeing.
    """
    logging.getLogger(_HTTP_CLIENT_LOGGER).setLevel(
        logging.INFO if debug else logging.WARNING
    )
    logger = logging.getLogger("food_catalog")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
