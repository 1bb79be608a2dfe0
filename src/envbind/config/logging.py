"""Log rendering for envbind.

envbind logs only through stdlib loggers under ``envbind`` and never touches
logging on import. :func:`configure_logging` attaches a single structlog
``ProcessorFormatter`` handler to the ``envbind`` logger, driven by
:class:`~envbind.config.settings.EnvBindSettings`. The root logger and other
libraries are left alone.

Two output modes:
- Human (default): console renderer to stderr
- JSON (``log_json``): one JSON object per line to stderr

Fields passed through ``extra=`` (plan and bind events) become structured keys.
"""

from __future__ import annotations

import logging
import sys

import structlog

from envbind.config.settings import EnvBindSettings

LOGGER_NAME = "envbind"


class EnvBindHandler(logging.StreamHandler):
    """Handler installed by :func:`configure_logging`; at most one per process."""


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(log_json: bool) -> list[structlog.types.Processor]:
    if log_json:
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def configure_logging(settings: EnvBindSettings | None = None) -> logging.Handler:
    """Route ``envbind`` log records to stderr through structlog.

    ``settings.verbose`` selects DEBUG instead of WARNING and
    ``settings.log_json`` selects the JSON renderer. Calling again replaces
    the previously installed handler. Records stop propagating to the root
    logger so they are not printed twice.
    """
    settings = settings if settings is not None else EnvBindSettings()

    handler = EnvBindHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=_render_chain(settings.log_json),
        )
    )

    lib_logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in lib_logger.handlers if isinstance(h, EnvBindHandler)]:
        lib_logger.removeHandler(existing)
    lib_logger.addHandler(handler)
    lib_logger.setLevel(logging.DEBUG if settings.verbose else logging.WARNING)
    lib_logger.propagate = False
    return handler
