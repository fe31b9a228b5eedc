# SPDX-License-Identifier: MIT
"""
Structured debug logging for the ideas toolkit.

Events are appended as JSON lines to ``<state_dir>/debug.log``. The level is
read from the IDEAS_DEBUG environment variable:

    0 - logging disabled
    1 - task, command and error events (default)
    2 - also load timings and subprocess details

Writes never raise; a logging failure must not break a command or the TUI.
"""

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ideas.config import get_int_setting
from ideas.paths import state_dir

MAX_MESSAGE_LEN = 500


def _truncate(text: str, limit: int = MAX_MESSAGE_LEN) -> str:
    return text if len(text) <= limit else text[:limit]


class DebugLogger:
    """Append-only JSON lines logger shared by the CLI, TUI and workers."""

    def __init__(self, log_path: Optional[Path] = None):
        self.level = self._resolve_level()
        self.log_path = log_path or state_dir() / "debug.log"
        self._lock = threading.Lock()

    @staticmethod
    def _resolve_level() -> int:
        raw = os.environ.get("IDEAS_DEBUG")
        if raw is None or raw == "":
            return get_int_setting("debugLevel", 1)
        try:
            return int(raw)
        except ValueError:
            return 1

    def _write(self, event: Dict[str, Any]) -> None:
        if self.level < 1:
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "pid": os.getpid(),
            **event,
        }
        line = json.dumps(record, default=str)
        with self._lock:
            try:
                self.log_path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.log_path, "a") as f:
                    f.write(line + "\n")
            except OSError:
                pass

    # Events

    def command(self, name: str, exit_code: int, duration_ms: float) -> None:
        self._write(
            {
                "event": "command",
                "level": "info",
                "command": name,
                "exit_code": exit_code,
                "duration_ms": round(duration_ms, 1),
            }
        )

    def load_timing(self, kind: str, count: int, duration_ms: float) -> None:
        if self.level < 2:
            return
        self._write(
            {
                "event": "load_timing",
                "level": "debug",
                "kind": kind,
                "count": count,
                "duration_ms": round(duration_ms, 1),
            }
        )

    def load_error(self, kind: str, path: Path, message: str) -> None:
        self._write(
            {
                "event": "load_error",
                "level": "error",
                "kind": kind,
                "path": str(path),
                "message": _truncate(message),
            }
        )

    def subprocess_error(self, argv: list, message: str, returncode: Optional[int] = None) -> None:
        if self.level < 2:
            return
        self._write(
            {
                "event": "subprocess_error",
                "level": "debug",
                "argv": [str(a) for a in argv],
                "returncode": returncode,
                "message": _truncate(message),
            }
        )

    def task_started(self, category: str, kind: str, target: Optional[str]) -> None:
        self._write(
            {
                "event": "task_started",
                "level": "info",
                "category": category,
                "kind": kind,
                "target": target,
            }
        )

    def task_finished(
        self, category: str, kind: str, success: bool, message: str, duration_ms: float
    ) -> None:
        self._write(
            {
                "event": "task_finished",
                "level": "info" if success else "error",
                "category": category,
                "kind": kind,
                "success": success,
                "message": _truncate(message),
                "duration_ms": round(duration_ms, 1),
            }
        )

    def analysis_recorded(self, project: str, commit: Optional[str]) -> None:
        self._write(
            {
                "event": "analysis_recorded",
                "level": "info",
                "project": project,
                "commit": commit,
            }
        )

    def data_saved(self, kind: str, count: int, path: Path) -> None:
        self._write(
            {
                "event": "data_saved",
                "level": "info",
                "kind": kind,
                "count": count,
                "path": str(path),
            }
        )

    def error(self, where: str, message: str) -> None:
        self._write(
            {
                "event": "error",
                "level": "error",
                "where": where,
                "message": _truncate(message),
            }
        )


_logger: Optional[DebugLogger] = None
_logger_lock = threading.Lock()


def get_logger() -> DebugLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    with _logger_lock:
        if _logger is None:
            _logger = DebugLogger()
        return _logger


def reset_logger() -> None:
    """Drop the cached logger so env changes are picked up (tests)."""
    global _logger
    with _logger_lock:
        _logger = None
