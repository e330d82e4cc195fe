#!/usr/bin/env python3
"""
TTS Activity Log - append-only record of every announcement attempt.

One JSON array shared by all hooks; read back by `manage_settings.py activity`.
"""

import secrets
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional

from hook_utils import (
    append_to_debug_log,
    append_to_json_log,
    exclusive_file_lock,
    get_project_logs_dir,
    json_log_lock_path,
    read_json_list,
    write_json_atomic,
)


ACTIVITY_LOG_NAME = "tts_activity.json"


def get_activity_log_path() -> Path:
    return get_project_logs_dir() / ACTIVITY_LOG_NAME


class ActivityRecorder:
    """Best-effort telemetry: recording never interrupts an announcement"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_activity_log_path()

    def record(self, hook_type: str, session_id: str, message: str, provider: str,
               duration_ms: int, success: bool, error: Optional[str] = None,
               agent_name: Optional[str] = None, agent_type: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Append one entry for a finished speak() attempt.

        Returns:
            The stored entry, or None if it could not be written
        """
        entry = {
            "id": f"{int(time.time() * 1000)}-{hook_type}-{secrets.token_hex(2)}",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "hook_type": hook_type,
            "session_id": session_id or "unknown",
            "agent_name": agent_name,
            "agent_type": agent_type,
            "message": message,
            "provider": provider,
            "duration_ms": duration_ms,
            "success": success,
            "error": error,
        }

        try:
            append_to_json_log(self.path, entry)
        except (OSError, TypeError, ValueError) as e:
            append_to_debug_log(f"activity log write failed ({self.path}): {e}")
            return None
        return entry

    def read_entries(self, hook_type: Optional[str] = None,
                     session_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """All entries, oldest first, optionally filtered"""
        entries = [e for e in read_json_list(self.path) if isinstance(e, dict)]
        if hook_type:
            entries = [e for e in entries if e.get("hook_type") == hook_type]
        if session_id:
            entries = [e for e in entries if e.get("session_id") == session_id]
        return entries

    def clear(self) -> None:
        with exclusive_file_lock(json_log_lock_path(self.path)):
            write_json_atomic(self.path, [])
