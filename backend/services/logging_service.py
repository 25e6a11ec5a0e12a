"""
Logging Service
===============

File and in-memory log sinks for the catalog API:

- a size-rotated `catalog.log` under LOG_DIR
- a bounded ring buffer of recent records, served by /logs/recent
"""

import logging
import os
from collections import deque
from logging.handlers import RotatingFileHandler
from typing import Any, Deque, Dict, List, Optional

LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.path.join(LOG_DIR, "catalog.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5000000"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))
RING_BUFFER_SIZE = int(os.getenv("RING_BUFFER_SIZE", "2000"))
RING_BUFFER_MIN_LEVEL = os.getenv("RING_BUFFER_MIN_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RingBufferHandler(logging.Handler):
    """Keeps the last `maxlen` records as plain dicts."""

    def __init__(self, maxlen: int = 2000):
        super().__init__()
        self.buffer: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.buffer.append({
                "ts": record.created,
                "level": record.levelname,
                "levelno": record.levelno,
                "name": record.name,
                "message": record.getMessage(),
                "lineno": record.lineno,
            })
        except Exception:
            self.handleError(record)

    def get_recent(self, limit: int = 500, min_level: Optional[str] = None) -> List[Dict[str, Any]]:
        records = list(self.buffer)
        if min_level:
            threshold = logging.getLevelName(min_level.upper())
            if isinstance(threshold, int):
                records = [r for r in records if r["levelno"] >= threshold]
        if limit > 0:
            records = records[-limit:]
        return records

    def clear(self) -> None:
        self.buffer.clear()


_ring_handler: Optional[RingBufferHandler] = None


def get_ring_handler() -> RingBufferHandler:
    global _ring_handler
    if _ring_handler is None:
        _ring_handler = RingBufferHandler(maxlen=RING_BUFFER_SIZE)
    return _ring_handler


def init_logging(log_dir: str = LOG_DIR) -> None:
    """Attach the rotating file and ring buffer handlers to the root logger."""
    os.makedirs(log_dir, exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    if root.level == logging.NOTSET:
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, os.path.basename(LOG_FILE)),
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    ring = get_ring_handler()
    ring.setFormatter(fmt)
    ring.setLevel(getattr(logging, RING_BUFFER_MIN_LEVEL, logging.INFO))
    if ring not in root.handlers:
        root.addHandler(ring)

    # Per-request transport chatter from the engine client
    logging.getLogger("elastic_transport.transport").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
