import logging
from typing import Any

import structlog

# event keys whose values never reach the log in full
SECRET_KEYS = ("token", "password", "secret", "authorization")


def _redact_secrets(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, str) and any(s in key.lower() for s in SECRET_KEYS):
            event_dict[key] = value[:4] + "***" if len(value) > 8 else "***"
    return event_dict


def setup_logging(debug: bool, level: str = "INFO") -> None:
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(log_level)

    # engine and pool chatter stay out of request logs unless asked for
    for name in ("sqlalchemy.engine", "sqlalchemy.pool"):
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request(request_id: str, rpc: str) -> None:
    """Attach the request id and RPC method to every log line of this request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, rpc=rpc)
