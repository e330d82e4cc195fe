#!/usr/bin/env python3
"""
Shared path, environment and logging helpers for voice-hooks.
Used by every hook entry point and by the announcement subsystem.
"""

import json
import os
import sys
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

if sys.platform == 'win32':
    import msvcrt
else:
    import fcntl

from dotenv import load_dotenv


_env_loaded = False


def detect_project_root() -> Path:
    """
    Detect the current project root directory.

    Returns:
        Path: $CLAUDE_PROJECT_DIR if set, else the nearest ancestor holding
        a .claude or .git directory, else the current working directory
    """
    project_dir = os.getenv('CLAUDE_PROJECT_DIR')
    if project_dir:
        return Path(project_dir)

    current_dir = Path.cwd()

    # Strategy 1: existing .claude directory, then Strategy 2: git root
    for marker in (".claude", ".git"):
        search_dir = current_dir
        for _ in range(10):  # Limit search depth
            if (search_dir / marker).is_dir():
                return search_dir

            parent = search_dir.parent
            if parent == search_dir:  # Reached filesystem root
                break
            search_dir = parent

    return current_dir


def get_project_voice_hooks_dir() -> Path:
    """<project-root>/.claude/voice-hooks/"""
    return detect_project_root() / ".claude" / "voice-hooks"


def get_project_logs_dir() -> Path:
    """<project-root>/.claude/voice-hooks/logs/"""
    return get_project_voice_hooks_dir() / "logs"


def get_state_dir() -> Path:
    """
    Machine-wide state directory shared by all hook processes.

    The announcement lock lives here so that hooks from different projects
    still take turns on the one audio device.
    """
    override = os.getenv('VOICE_HOOKS_STATE_DIR')
    if override:
        return Path(override)
    return Path.home() / ".claude" / "tts"


def ensure_session_log_dir(session_id: str) -> Path:
    """Ensure ~/.claude/logs/<session_id>/ exists and return it."""
    log_dir = Path.home() / ".claude" / "logs" / (session_id or "unknown")
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def load_project_env() -> None:
    """
    Load $CLAUDE_PROJECT_DIR/.env once per process.

    Hooks run with an arbitrary working directory, so the project .env is
    located explicitly. Variables already present in the environment win.
    """
    global _env_loaded
    if _env_loaded:
        return
    _env_loaded = True

    project_dir = os.getenv('CLAUDE_PROJECT_DIR')
    if project_dir:
        env_path = Path(project_dir) / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)
            return
    load_dotenv(override=False)


def read_stdin_json() -> dict:
    """Read the hook payload from stdin. Empty input yields an empty dict."""
    raw = sys.stdin.read()
    if not raw.strip():
        return {}
    data = json.loads(raw)
    return data if isinstance(data, dict) else {}


def read_json_list(path: Path) -> list:
    """Read a JSON array file, treating missing or corrupt content as empty."""
    if not path.exists():
        return []
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        return []
    return data if isinstance(data, list) else []


def write_json_atomic(path: Path, data) -> None:
    """Write JSON through a temp file in the same directory, then rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


@contextmanager
def exclusive_file_lock(lock_path: Path):
    """
    Hold an OS-level exclusive lock on lock_path for the body of the block.

    Blocks until the lock is free. The lock is released when the file
    handle closes, so a crashed holder never leaves it behind.
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, 'a+b') as f:
        if sys.platform == 'win32':
            f.seek(0)
            msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)
        else:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            if sys.platform == 'win32':
                f.seek(0)
                msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
            else:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def json_log_lock_path(log_path: Path) -> Path:
    """Sidecar lock guarding read-modify-write of a JSON array log"""
    log_path = Path(log_path)
    return log_path.with_name(log_path.name + '.lock')


def append_to_json_log(log_path: Path, entry) -> None:
    """
    Append an entry to a JSON log file holding an array of objects.
    Creates the file and its parents; corrupt content starts a fresh array.
    Concurrent appenders from other processes are serialized on a
    `<log>.lock` sidecar so no entry is overwritten.
    """
    log_path = Path(log_path)
    with exclusive_file_lock(json_log_lock_path(log_path)):
        log_data = read_json_list(log_path)
        log_data.append(entry)
        write_json_atomic(log_path, log_data)


def append_to_debug_log(message: str, log_path: Path = None) -> None:
    """Append a timestamped line to the debug log. Never raises."""
    try:
        if log_path is None:
            log_path = get_project_logs_dir() / "tts_debug.log"
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, 'a', encoding='utf-8') as f:
            f.write(f"{datetime.now().isoformat()} - {message}\n")
    except OSError:
        pass


def warn(message: str) -> None:
    """Print a warning to stderr with the voice-hooks prefix."""
    print(f"[voice-hooks] {message}", file=sys.stderr)


def get_project_name() -> str:
    """
    Project name used in spoken messages.

    Priority: settings project.name > package.json name in the project
    root > project directory basename > "unknown project"
    """
    from settings import get_setting
    configured = get_setting("project.name")
    if configured:
        return configured

    project_root = detect_project_root()

    package_json = project_root / "package.json"
    if package_json.exists():
        try:
            with open(package_json, 'r', encoding='utf-8') as f:
                name = json.load(f).get('name')
            if name:
                return name
        except (json.JSONDecodeError, OSError, AttributeError):
            pass

    return project_root.name or "unknown project"
