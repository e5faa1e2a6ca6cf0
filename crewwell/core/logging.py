import logging
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter


class CrewWellJsonFormatter(JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single JSON handler on the root logger.
    Safe to call more than once (e.g. one app per test).
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_crewwell", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(CrewWellJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    handler._crewwell = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
