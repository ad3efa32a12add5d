import json
import logging
from datetime import UTC, datetime

# Attributes that callers may attach via ``extra=`` and that we surface as top-level keys
_EXTRA_FIELDS = ("service", "user_id", "request_id", "topic")


class JSONFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per record for log shippers.
    """

    def __init__(self, service_name: str | None = None):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process_id": record.process,
            "thread_id": record.thread,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        if self.service_name:
            log_obj["service"] = self.service_name
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_obj[name] = getattr(record, name)

        return json.dumps(log_obj, default=str)


def setup_structured_logging(service_name: str, level: str = "INFO") -> None:
    """
    Configure the root logger to use JSON formatting
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(service_name))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace uvicorn's default handlers so every line is JSON
    if root_logger.handlers:
        root_logger.handlers = []

    root_logger.addHandler(handler)

    # Provider SDKs log every request at INFO
    for noisy in ("httpx", "httpcore", "openai", "stripe"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
