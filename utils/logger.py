"""Universal logfire setup for the application."""

import os
import logfire


def configure_logging() -> None:
    """Configure logfire once at process start.

    Logs are only shipped when `LOGFIRE_WRITE_TOKEN` is set, otherwise they stay local.
    """
    logfire.configure(
        token=os.getenv("LOGFIRE_WRITE_TOKEN"),
        service_name="catalog-site-api",
        send_to_logfire="if-token-present",
    )


def instrument_libraries():
    """Instrument the libraries the API talks through for better observability."""
    logfire.instrument_pymongo()
