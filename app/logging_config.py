import json
import logging
import os
import re
import sys
from datetime import UTC, datetime

# Bearer credentials and bare JWTs (three base64url segments)
BEARER_REGEX = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+")
JWT_REGEX = re.compile(r"\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")
MASK_STRING = "[REDACTED]"

# Field names in `extra["props"]` to always mask the value of
SENSITIVE_FIELD_NAMES = {
    "authorization",
    "password",
    "token",
    "access_token",
    "refresh_token",
    "csrf_token",
    "secret",
    "jwt_secret",
    "cookie",
}


def mask_text(text: str) -> str:
    masked = BEARER_REGEX.sub(f"Bearer {MASK_STRING}", text)
    return JWT_REGEX.sub(MASK_STRING, masked)


class SecretMaskingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # Stored separately so the original record.msg/args stay untouched
        record.masked_message = mask_text(record.getMessage())

        if hasattr(record, "props") and isinstance(record.props, dict):
            masked_props = {}
            for key, value in record.props.items():
                if key.lower() in SENSITIVE_FIELD_NAMES:
                    masked_props[key] = MASK_STRING
                elif isinstance(value, str):
                    masked_props[key] = mask_text(value)
                else:
                    masked_props[key] = value
            record.props = masked_props
        return True  # Always process the record


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            # Use the masked message if available, otherwise the original
            "message": getattr(record, "masked_message", record.getMessage()),
            "logger_name": record.name,
            "func_name": record.funcName,
            "line_no": record.lineno,
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "props") and isinstance(record.props, dict):
            log_entry.update(record.props)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str | None = None):
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove default handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JsonFormatter())
    console_handler.addFilter(SecretMaskingFilter())
    root_logger.addHandler(console_handler)

    # Suppress verbose logging from libraries
    logging.getLogger("uvicorn.error").propagate = False
    logging.getLogger("uvicorn.access").propagate = False
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    # Example of adding props to a log record:
    # logger = logging.getLogger(__name__)
    # logger.info("Operation resolved", extra={"props": {"operation": "echo"}})
