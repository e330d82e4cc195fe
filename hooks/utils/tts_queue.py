#!/usr/bin/env python3
"""
File-lock queue for sequential TTS playback across hook processes.

Every hook runs in its own short-lived process, but there is one speaker.
The lock is a single file whose content is the PID of the process that is
speaking. It is created with O_CREAT | O_EXCL, so creation is atomic: the
process that creates it holds it. A lock naming a dead PID is stale and is
removed by the next process that finds it. Waiting is bounded by
tts.queue.max_wait_ms; past that the lock is forced and, failing that, the
announcement is spoken without it. An announcement is never dropped because
of contention.

There is no FIFO ordering: whoever polls first after a release wins.
"""

import math
import os
import time
from pathlib import Path
from typing import Optional

from activity_log import ActivityRecorder
from hook_utils import append_to_debug_log, get_state_dir, warn
from normalizer import normalize_tts_text
from process_utils import is_pid_alive
from settings import get_setting


LOCK_FILE_NAME = "queue.lock"
DEFAULT_POLL_INTERVAL_MS = 200
DEFAULT_MAX_WAIT_MS = 30000

# A lock file without a PID is normal for the instant between create and
# write. Only after this long is it treated as abandoned.
UNREADABLE_LOCK_GRACE_S = 2.0

# Holder states reported by AnnouncementQueue.holder_state()
LOCK_FREE = "free"
LOCK_HELD = "held"
LOCK_STALE = "stale"


def get_lock_path() -> Path:
    return get_state_dir() / LOCK_FILE_NAME


def _setting_flag(key: str, default: bool) -> bool:
    """Boolean setting; strings like "false" or "off" count as False, junk as default"""
    value = get_setting(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    append_to_debug_log(f"TTS queue: ignoring invalid {key}={value!r}")
    return default


def _setting_ms(key: str, default: int) -> float:
    """Non-negative millisecond setting; numeric strings are accepted, junk falls back to default"""
    value = get_setting(key, default)
    try:
        ms = float(value)
    except (TypeError, ValueError):
        ms = -1.0
    if isinstance(value, bool) or not math.isfinite(ms) or ms < 0:
        append_to_debug_log(f"TTS queue: ignoring invalid {key}={value!r}")
        return default
    return ms


class AnnouncementQueue:
    """
    Serializes backend.speak() calls across processes.

    Per-caller states: idle -> acquiring -> holding -> releasing -> done.
    """

    def __init__(self, lock_path: Optional[Path] = None, enabled: Optional[bool] = None,
                 max_wait_ms: Optional[int] = None, poll_interval_ms: Optional[int] = None,
                 recorder: Optional[ActivityRecorder] = None):
        self.lock_path = Path(lock_path) if lock_path else get_lock_path()
        self.enabled = _setting_flag("tts.queue.enabled", True) if enabled is None else enabled
        self.max_wait_ms = (_setting_ms("tts.queue.max_wait_ms", DEFAULT_MAX_WAIT_MS)
                            if max_wait_ms is None else max_wait_ms)
        self.poll_interval_ms = (_setting_ms("tts.queue.poll_interval_ms", DEFAULT_POLL_INTERVAL_MS)
                                 if poll_interval_ms is None else poll_interval_ms)
        self.recorder = recorder if recorder is not None else ActivityRecorder()
        self.pid = os.getpid()

    # -- lock primitives -------------------------------------------------

    def _try_create(self) -> bool:
        """
        Atomically create the lock file holding our PID.

        Returns False if the file already exists. Any other OSError
        (permissions, disk full) is raised.
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            return False

        try:
            os.write(fd, str(self.pid).encode('ascii'))
        except OSError:
            os.close(fd)
            self._remove_lock()
            raise
        os.close(fd)
        return True

    def _remove_lock(self) -> None:
        try:
            os.unlink(self.lock_path)
        except FileNotFoundError:
            pass  # Someone else got there first

    def read_holder(self) -> Optional[int]:
        """PID recorded in the lock file, or None if missing or unparseable"""
        try:
            content = self.lock_path.read_text(encoding='ascii').strip()
            return int(content)
        except (FileNotFoundError, ValueError, UnicodeDecodeError):
            return None

    def holder_state(self) -> str:
        """
        Classify the current lock file: LOCK_FREE, LOCK_HELD or LOCK_STALE.

        The read is unguarded; a file that disappears mid-check is free.
        """
        try:
            content = self.lock_path.read_text(encoding='ascii', errors='replace').strip()
        except FileNotFoundError:
            return LOCK_FREE

        try:
            holder = int(content)
        except ValueError:
            try:
                age = time.time() - self.lock_path.stat().st_mtime
            except FileNotFoundError:
                return LOCK_FREE
            return LOCK_STALE if age > UNREADABLE_LOCK_GRACE_S else LOCK_HELD

        return LOCK_HELD if is_pid_alive(holder) else LOCK_STALE

    def acquire(self) -> bool:
        """
        One acquisition attempt.

        If the lock is stale (or vanished while we looked), clear it and
        retry creation exactly once; contention after that is left to the
        caller's poll loop.
        """
        if self._try_create():
            return True

        state = self.holder_state()
        if state == LOCK_HELD:
            return False
        if state == LOCK_STALE:
            append_to_debug_log(f"TTS queue: removing stale lock (holder {self.read_holder()})")
            self._remove_lock()
        return self._try_create()

    def release(self) -> None:
        """Delete the lock only if it still names this process. Never raises."""
        try:
            if self.read_holder() == self.pid:
                os.unlink(self.lock_path)
        except OSError:
            pass

    def wait_for_lock(self) -> bool:
        """
        Poll until the lock is ours or max_wait_ms has passed.

        Returns:
            True if the lock is held, False if the escape valve could not
            get it either and the caller should speak unlocked
        """
        max_wait = self.max_wait_ms / 1000.0
        poll = self.poll_interval_ms / 1000.0
        start = time.monotonic()

        while not self.acquire():
            remaining = max_wait - (time.monotonic() - start)
            if remaining <= 0:
                warn("TTS queue: max wait exceeded, force-acquiring lock")
                append_to_debug_log(f"TTS queue: forcing lock held by {self.read_holder()} after {self.max_wait_ms}ms")
                self._remove_lock()
                return self._try_create()
            time.sleep(min(poll, remaining))

        return True

    # -- announcing ------------------------------------------------------

    def announce(self, backend, text: str, hook_type: str = "unknown", session_id: str = "unknown",
                 agent_name: Optional[str] = None, agent_type: Optional[str] = None) -> bool:
        """
        Speak text through backend, waiting for our turn on the speaker.

        Never raises for backend or lock failures. The attempt is recorded
        in the activity log before returning.

        Returns:
            True if the backend finished speaking, False otherwise
        """
        context = {
            "hook_type": hook_type,
            "session_id": session_id,
            "agent_name": agent_name,
            "agent_type": agent_type,
        }

        if not self.enabled:
            return self._speak_and_record(backend, text, context)

        try:
            holding = self.wait_for_lock()
        except OSError as e:
            append_to_debug_log(f"TTS queue: lock unusable ({e}), speaking without lock")
            holding = False

        if not holding:
            return self._speak_and_record(backend, text, context)

        try:
            return self._speak_and_record(backend, text, context)
        finally:
            self.release()

    def _speak_and_record(self, backend, text: str, context: dict) -> bool:
        provider = getattr(backend, "name", type(backend).__name__)
        error = None

        start = time.monotonic()
        try:
            backend.speak(normalize_tts_text(text))
        except Exception as e:
            error = str(e) or type(e).__name__
            append_to_debug_log(f"TTS error ({provider}): {error}")
        duration_ms = int((time.monotonic() - start) * 1000)

        try:
            self.recorder.record(
                message=text,
                provider=provider,
                duration_ms=duration_ms,
                success=error is None,
                error=error,
                **context,
            )
        except Exception as e:
            append_to_debug_log(f"TTS activity record failed: {e}")

        return error is None


def speak_with_lock(backend, text: str, **context) -> bool:
    """Announce through a queue configured from settings"""
    return AnnouncementQueue().announce(backend, text, **context)
