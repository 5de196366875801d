"""
Logging configuration for structured JSON logging.

Every record carries the active trace context so logs can be joined with
traces.
"""

import sys

from opentelemetry import trace
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds trace context."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format(span_context.trace_id, "032x")
            log_record["span_id"] = format(span_context.span_id, "016x")


# Project packages that log at the environment's level
APP_LOGGERS = ("core", "api", "licenses", "LicenseAuthority")


def get_logging_config(environment: str = "development") -> dict:
    """
    Build the Django LOGGING dictionary.

    Development logs application packages at DEBUG; every other environment
    at INFO. Django's own loggers stay quieter in all environments.

    Args:
        environment: Environment name (development, production, test)
    """
    app_level = "DEBUG" if environment == "development" else "INFO"

    def console(level):
        return {"handlers": ["console"], "level": level, "propagate": False}

    loggers = {name: console(app_level) for name in APP_LOGGERS}
    loggers["django"] = console("INFO")
    loggers["django.request"] = console("WARNING")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d",
            },
            "simple": {"format": "{levelname} {name} {message}", "style": "{"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {"handlers": ["console"], "level": app_level},
        "loggers": loggers,
    }
