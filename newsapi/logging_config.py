"""Structured logging setup: JSON in production, plain text for local runs."""
import json
import logging
from datetime import datetime, timezone

# Fields bound by the request logger or passed via ``extra=`` at call sites.
_CONTEXT_FIELDS = ("request_id", "method", "path", "news_id", "error", "status")
_HANDLER_NAME = "newsapi"


class JSONFormatter(logging.Formatter):
    """Format records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "source": f"{record.pathname}:{record.lineno}",
            "message": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val if isinstance(val, (int, float, bool)) else str(val)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the service's root handler, replacing a previous one."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
        ))
    handler.set_name(_HANDLER_NAME)
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
