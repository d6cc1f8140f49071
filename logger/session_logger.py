"""Per-session log file mirroring loguru output."""
from __future__ import annotations

import json
import os
from datetime import datetime
from typing import Any, Optional

from loguru import logger


class SessionLogger:
    """Writes a START/END framed log file for one grading session.

    Everything logged through loguru at INFO or above is mirrored into the
    file, so grade writes, lookups and errors of a session end up together.
    """

    def __init__(self, log_dir: str = "logs/sessions", level: str = "INFO") -> None:
        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_path = os.path.join(self.log_dir, f"speak2sheet_session_{timestamp}.log")
        self._sink_id: Optional[int] = logger.add(
            self.log_path,
            format="[{time:YYYY-MM-DD HH:mm:ss}] {level}: {message}",
            level=level,
            encoding="utf-8",
            enqueue=True,
        )
        self._ended = False
        self.log("=== SESSION START ===")

    def log(self, message: str) -> None:
        logger.info(message)

    def log_kv(self, key: str, value: Any) -> None:
        """Log a key/value pair, dicts and lists as indented JSON."""
        if isinstance(value, (dict, list)):
            value = json.dumps(value, indent=2, ensure_ascii=False, default=str)
        self.log(f"{key}: {value}")

    def log_end(self) -> None:
        """Write the END marker and detach the file sink (idempotent)."""
        if self._ended:
            return
        self._ended = True
        self.log("=== SESSION END ===")
        if self._sink_id is not None:
            logger.remove(self._sink_id)
            self._sink_id = None
