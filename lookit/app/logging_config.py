import json
import logging
import os

# Attributes passed through ``extra=`` that the JSON handler copies into each line.
CONTEXT_FIELDS = ("task_id", "user_id", "key")


def setup_logging() -> None:
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if os.environ.get("JSON_LOGS", "0") == "1":
        logging.getLogger().handlers = [JSONLogHandler()]


class JSONLogHandler(logging.StreamHandler):
    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            msg = {
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            for field in CONTEXT_FIELDS:
                if hasattr(record, field):
                    msg[field] = getattr(record, field)
            if record.exc_info:
                msg["exc_info"] = self.formatException(record.exc_info)
            self.stream.write(json.dumps(msg, default=str) + "\n")
            self.flush()
        except Exception:
            super().emit(record)
