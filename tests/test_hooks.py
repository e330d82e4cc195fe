"""End-to-end runs of the hook scripts as the host would invoke them."""

import json
import os
import subprocess
import sys

import pytest

from conftest import HOOKS_DIR


def run_hook(script, payload, *args):
    stdin = payload if isinstance(payload, str) else json.dumps(payload)
    return subprocess.run(
        [sys.executable, str(HOOKS_DIR / script), *args],
        input=stdin,
        capture_output=True,
        text=True,
        timeout=60,
    )


@pytest.fixture
def silent_project(project_dir):
    """A project whose priority list names no provider, so nothing is spoken"""
    config = project_dir / ".claude" / "voice-hooks.json"
    config.parent.mkdir(parents=True)
    config.write_text(json.dumps({"tts": {"provider_priority": []}}))
    return project_dir


@pytest.mark.parametrize("script, log_name", [
    ("stop.py", "stop.json"),
    ("subagent_stop.py", "subagent_stop.json"),
    ("notification.py", "notification.json"),
    ("session_end.py", "session_end.json"),
])
def test_hook_logs_payload_to_session_dir(isolated_env, script, log_name):
    payload = {"session_id": "sess-1", "hook_event_name": "Test"}

    result = run_hook(script, payload)

    assert result.returncode == 0
    log_path = isolated_env["home"] / ".claude" / "logs" / "sess-1" / log_name
    assert json.loads(log_path.read_text()) == [payload]


def test_repeated_calls_append_to_session_log(isolated_env):
    run_hook("stop.py", {"session_id": "sess-2", "n": 1})
    run_hook("stop.py", {"session_id": "sess-2", "n": 2})

    log_path = isolated_env["home"] / ".claude" / "logs" / "sess-2" / "stop.json"
    assert [entry["n"] for entry in json.loads(log_path.read_text())] == [1, 2]


@pytest.mark.parametrize("script", ["stop.py", "subagent_stop.py", "notification.py", "session_end.py"])
def test_malformed_stdin_exits_cleanly(script):
    result = run_hook(script, "{this is not json")

    assert result.returncode == 0


def test_notify_without_provider_exits_cleanly(silent_project, lock_path):
    result = run_hook("stop.py", {"session_id": "sess-3"}, "--notify")

    assert result.returncode == 0
    activity = silent_project / ".claude" / "voice-hooks" / "logs" / "tts_activity.json"
    assert not activity.exists()
    assert not lock_path.exists()


def test_stop_exports_chat_transcript(isolated_env, tmp_path):
    transcript = tmp_path / "transcript.jsonl"
    transcript.write_text('{"role": "user"}\n\nnot json\n{"role": "assistant"}\n')

    result = run_hook("stop.py", {"session_id": "sess-4", "transcript_path": str(transcript)}, "--chat")

    assert result.returncode == 0
    chat = isolated_env["home"] / ".claude" / "logs" / "sess-4" / "chat.json"
    assert json.loads(chat.read_text()) == [{"role": "user"}, {"role": "assistant"}]


@pytest.fixture
def fake_espeak(tmp_path, monkeypatch):
    """An `espeak` on PATH that logs what it is asked to say, or idles with --hold"""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    spoken_log = tmp_path / "espeak-spoken.txt"
    script = bin_dir / "espeak"
    script.write_text(
        f"#!{sys.executable}\n"
        "import sys, time\n"
        "if sys.argv[1:] == ['--hold']:\n"
        "    time.sleep(60)\n"
        "else:\n"
        f"    with open({str(spoken_log)!r}, 'a') as f:\n"
        "        f.write(sys.argv[-1] + '\\n')\n"
    )
    script.chmod(0o755)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return script, spoken_log


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="native speech path uses espeak on Linux")
def test_notification_waits_for_holder_instead_of_killing_it(project_dir, lock_path, fake_espeak):
    script, spoken_log = fake_espeak
    config = project_dir / ".claude" / "voice-hooks.json"
    config.parent.mkdir(parents=True)
    config.write_text(json.dumps({"tts": {
        "provider_priority": ["native"],
        "queue": {"max_wait_ms": 400, "poll_interval_ms": 50},
    }}))

    holder = subprocess.Popen([str(script), "--hold"])
    try:
        lock_path.parent.mkdir(parents=True)
        lock_path.write_text(str(holder.pid))

        result = run_hook("notification.py", {"session_id": "sess-5", "message": "Permission needed"}, "--notify")

        assert result.returncode == 0
        assert holder.poll() is None
        assert spoken_log.read_text().splitlines() == ["Permission needed"]
    finally:
        holder.kill()
        holder.wait()

    activity = project_dir / ".claude" / "voice-hooks" / "logs" / "tts_activity.json"
    entries = json.loads(activity.read_text())
    assert [(e["hook_type"], e["success"]) for e in entries] == [("notification", True)]


def test_notification_with_toggle_off_speaks_nothing(project_dir, lock_path):
    config = project_dir / ".claude" / "voice-hooks.json"
    config.parent.mkdir(parents=True)
    config.write_text(json.dumps({"tts": {"hook_toggles": {"notification": False}}}))

    result = run_hook("notification.py", {"session_id": "sess-6", "message": "Permission needed"}, "--notify")

    assert result.returncode == 0
    assert not (project_dir / ".claude" / "voice-hooks" / "logs" / "tts_activity.json").exists()
    assert not lock_path.exists()
