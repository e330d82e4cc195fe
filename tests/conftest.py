"""Shared fixtures: every test runs against a throwaway HOME, project and lock dir."""

import subprocess
import sys
import threading
import time
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
HOOKS_DIR = REPO_ROOT / "hooks"
UTILS_DIR = HOOKS_DIR / "utils"

sys.path.insert(0, str(UTILS_DIR))

import hook_utils  # noqa: E402
from settings import reset_settings_cache  # noqa: E402


API_KEY_VARS = [
    "ELEVENLABS_API_KEY",
    "OPENAI_API_KEY",
    "UNREAL_SPEECH_API_KEY",
    "DEEPSEEK_API_KEY",
]


class FakeBackend:
    """Records every speak() call; optionally sleeps or fails."""

    def __init__(self, name="fake", available=True, delay=0.0, error=None, on_speak=None):
        self.name = name
        self.available = available
        self.delay = delay
        self.error = error
        self.on_speak = on_speak
        self.spoken = []
        self.starts = []
        self._lock = threading.Lock()

    def is_available(self):
        return self.available

    def speak(self, text):
        with self._lock:
            self.starts.append(time.monotonic())
            self.spoken.append(text)
        if self.on_speak:
            self.on_speak(text)
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    home = tmp_path / "home"
    project = tmp_path / "project"
    state = tmp_path / "state"
    home.mkdir()
    project.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("CLAUDE_PROJECT_DIR", str(project))
    monkeypatch.setenv("VOICE_HOOKS_STATE_DIR", str(state))
    monkeypatch.setenv("VOICE_HOOKS_GLOBAL_CONFIG", str(tmp_path / "global-voice-hooks.json"))
    for var in API_KEY_VARS:
        monkeypatch.delenv(var, raising=False)

    # Keep a developer's real .env out of the tests
    monkeypatch.setattr(hook_utils, "_env_loaded", True)

    reset_settings_cache()
    yield {"home": home, "project": project, "state": state}
    reset_settings_cache()


@pytest.fixture
def project_dir(isolated_env):
    return isolated_env["project"]


@pytest.fixture
def lock_path(isolated_env):
    return isolated_env["state"] / "queue.lock"


@pytest.fixture
def live_pid():
    """PID of a process that stays alive for the duration of the test"""
    proc = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
    try:
        yield proc.pid
    finally:
        proc.kill()
        proc.wait()


@pytest.fixture
def dead_pid():
    """PID of a process that has already exited and been reaped"""
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait()
    return proc.pid


@pytest.fixture
def fake_backend():
    return FakeBackend()
