"""Log configuration for the webhook server and review pipeline."""

import logging
import sys

from compatbot.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# One line per request at INFO would drown the review summaries
CHATTY_LOGGERS = ("httpx", "httpcore")


def setup_logging() -> None:
    """Send compatbot's logs to stdout at ``settings.log_level``."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_observability() -> None:
    """Configure logging, then Logfire tracing when ``LOGFIRE_TOKEN`` is set.

    Logfire traces the GitHub API calls and raw-content downloads the
    review makes. It is an optional extra; a missing install or a failed
    configure is logged and the bot runs on plain logging.
    """
    setup_logging()
    logger = logging.getLogger(__name__)

    if not settings.logfire_token:
        logger.info("Logfire token not configured, using plain logging")
        return

    try:
        import logfire

        logfire.configure(token=settings.logfire_token)
        logfire.instrument_httpx()
    except ImportError:
        logger.warning(
            "LOGFIRE_TOKEN is set but logfire is not installed; "
            "install compatbot[logfire] to enable tracing"
        )
        return
    except Exception as e:
        logger.error(f"Logfire setup failed, continuing without tracing: {e}")
        return

    logger.info(f"Logfire tracing of GitHub calls enabled ({settings.environment})")
