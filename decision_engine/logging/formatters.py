import logging
import json
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Formats logs as JSON."""

    def format(self, record):
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add extra fields (context)
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        # Add exception info
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


class PrettyFormatter(logging.Formatter):
    """Console formatter; colouring is applied by coloredlogs when installed."""

    def format(self, record):
        msg = super().format(record)
        context = getattr(record, "extra_data", {})
        if context:
            msg += f" | {json.dumps(context, default=str)}"
        return msg
