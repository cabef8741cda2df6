import sys
import structlog
import logging
from lti_trust.shared.core.config import get_settings

REDACTED_FIELDS = {
    "login_hint", "lti_message_hint", "token", "id_token", "secret",
    "client_secret", "password", "private_key"
}

# azure-core logs every HTTP request at INFO
NOISY_LOGGERS = ("azure.core.pipeline.policies.http_logging_policy", "azure.identity")


def sensitive_field_redactor(logger, method_name, event_dict):
    """
    Redact platform-issued user hints and credentials from logs.
    Login hints identify end users on the platform and must not reach telemetry.
    """
    for field in REDACTED_FIELDS:
        if field in event_dict:
            event_dict[field] = "[REDACTED]"

    for container in ["params", "details", "extra"]:
        if container in event_dict and isinstance(event_dict[container], dict):
            for field in REDACTED_FIELDS:
                if field in event_dict[container]:
                    event_dict[container][field] = "[REDACTED]"

    return event_dict


def setup_logging():
    """
    Configure structlog and send standard-library records (uvicorn, azure SDK)
    through the same processors, so every line shares one format and the redactor.
    """
    settings = get_settings()

    if settings.DEBUG:
        renderer = structlog.dev.ConsoleRenderer()
        min_level = logging.DEBUG
    else:
        renderer = structlog.processors.JSONRenderer()
        min_level = logging.INFO

    shared_processors = [
        structlog.contextvars.merge_contextvars,  # request_id from RequestIDMiddleware
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        sensitive_field_redactor,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.processors.format_exc_info, renderer],
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(min_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
