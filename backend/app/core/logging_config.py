"""
Structured logging configuration using structlog
Provides JSON-formatted logs with request context enrichment
"""

import logging
import structlog
import sys


def app_context_processor(app_name: str, version: str):
    """Processor stamping every entry with the service name and release"""
    def add_app_context(logger, method_name, event_dict):
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("version", version)
        return event_dict
    return add_app_context


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    app_name: str = "receipt-ocr",
    version: str = "unknown",
):
    """
    Configure structured logging for the application

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_output: JSON lines for production, colored console otherwise
        app_name: Value of the `app` key on every entry
        version: Value of the `version` key on every entry
    """
    renderer = (
        # ensure_ascii off so Japanese receipt text stays readable
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            app_context_processor(app_name, version),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str = None, **kwargs):
    """
    Bind request-specific context to the current logger

    Usage:
        bind_request_context(request_id="abc123", path="/api/receipts/ocr")
        logger.info("receipt_parsed")  # carries request_id and path
    """
    if request_id:
        kwargs["request_id"] = request_id
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context():
    structlog.contextvars.clear_contextvars()
