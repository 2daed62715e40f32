"""Central logging configuration.

Application code logs through structlog with dotted event names and
keyword context (``logger.info("notifier.sent", client=...)``). This
module wires structlog on top of stdlib logging once per process so
uvicorn's own loggers and ours share one format.
"""

import logging

import structlog

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog once per process."""
    global _configured
    if _configured:
        return

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )
    _configured = True
