"""structlog setup for the CLI and for embedding applications.

Learn: every module grabs `logger = structlog.get_logger()` and logs
dotted event names with keyword context:

    logger.info("realtime.mounted", club_id=club_id, channels=13)

Who is acting and for which club is not passed per call. The dashboard
binds it once with bind_session(), and every event logged afterwards
carries user_id / role / club_id until clear_context().

configure_logging() is called once by the CLI. Library users who never
call it still get structlog's default console output.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from clubdesk.auth.session import Session

# Chatty dependencies: request lines from httpx, socket frames from supabase
QUIET_LOGGERS = ("httpx", "httpcore", "realtime", "supabase", "websockets")

SESSION_CONTEXT_FIELDS = ("user_id", "role", "club_id", "tenant_id")


def _renders_json(json_logs: bool, environment: str) -> bool:
    return json_logs or environment == "production"


def _pre_chain(use_json: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    chain.append(structlog.processors.format_exc_info if use_json else structlog.dev.set_exc_info)
    return chain


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    environment: str = "development",
) -> None:
    """Route structlog and stdlib records through one stderr handler.

    stderr keeps stdout free for command output (tables, the clock).
    """
    use_json = _renders_json(json_logs, environment)
    pre_chain = _pre_chain(use_json)
    renderer: Processor = (
        structlog.processors.JSONRenderer() if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# ─── Context ──────────────────────────────────────────────


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def bind_session(session: Session, **extra: Any) -> None:
    """Bind the signed-in identity; fields the session lacks are skipped."""
    fields = {
        name: getattr(session, name)
        for name in SESSION_CONTEXT_FIELDS
        if getattr(session, name)
    }
    bind_context(**{**fields, **extra})


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
