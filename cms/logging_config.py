"""
Process-wide logging setup.

Modules log through ``logging.getLogger(__name__)``. ``configure_logging``
installs a single root handler at startup that renders either a readable
console line or one JSON object per record (structlog ProcessorFormatter).
"""

import logging
import sys

import structlog

from cms.config import Settings

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
        )
    return logging.Formatter(CONSOLE_FORMAT)


def configure_logging(settings: Settings) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(settings.log_format))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    # Library chatter
    for noisy in ("sqlalchemy.engine", "aiosqlite", "apscheduler"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
