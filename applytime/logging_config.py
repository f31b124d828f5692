from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict

_TEXT_FMT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


class StructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra_data"):
            log_entry.update(getattr(record, "extra_data"))

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def configure_logging(*, level: str = "WARNING", fmt: str = "text") -> None:
    """
    Idempotent-ish logging config. Writes to stderr; stdout carries the report.
    Importing this module does nothing, call configure_logging().
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured by app/test runner; keep hands off.
        return

    formatter: logging.Formatter
    if fmt == "json":
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(_TEXT_FMT)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), handlers=[handler])
