"""Tests for hook-level announcement wiring."""

import json

import pytest

import tts_announcer
from activity_log import ActivityRecorder
from conftest import FakeBackend


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend(name="fake")
    monkeypatch.setattr(tts_announcer, "resolve_tts_backend", lambda: fake)
    return fake


def write_project_config(project_dir, config):
    path = project_dir / ".claude" / "voice-hooks.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config))


def test_announce_speaks_and_records(backend, lock_path):
    assert tts_announcer.announce_for_hook("stop", "Work complete", session_id="abc") is True

    assert backend.spoken == ["Work complete"]
    entries = ActivityRecorder().read_entries()
    assert len(entries) == 1
    assert entries[0]["hook_type"] == "stop"
    assert entries[0]["session_id"] == "abc"
    assert not lock_path.exists()


def test_hook_toggle_off_skips_speech(backend, project_dir):
    write_project_config(project_dir, {"tts": {"hook_toggles": {"notification": False}}})

    assert tts_announcer.announce_for_hook("notification", "Need input") is False
    assert backend.spoken == []
    assert ActivityRecorder().read_entries() == []


def test_no_available_backend_skips_speech(monkeypatch):
    monkeypatch.setattr(tts_announcer, "resolve_tts_backend", lambda: None)

    assert tts_announcer.announce_for_hook("stop", "Work complete") is False
    assert ActivityRecorder().read_entries() == []


def test_empty_message_is_not_spoken(backend):
    assert tts_announcer.announce_for_hook("stop", "") is False
    assert backend.spoken == []


def test_unexpected_errors_are_swallowed(monkeypatch):
    def explode():
        raise RuntimeError("resolver exploded")

    monkeypatch.setattr(tts_announcer, "resolve_tts_backend", explode)

    assert tts_announcer.announce_for_hook("stop", "Work complete") is False


def test_completion_message_names_the_project(project_dir, monkeypatch):
    write_project_config(project_dir, {"project": {"name": "Orbit"}})
    monkeypatch.setattr(tts_announcer.random, "choice", lambda options: options[0])

    assert tts_announcer.get_completion_message() == "Work complete in Orbit"


def test_user_name_prefix(project_dir, monkeypatch):
    write_project_config(project_dir, {"tts": {"user_name": "Sam", "name_include_probability": 1.0}})

    assert tts_announcer.maybe_address_user("Work complete") == "Sam, work complete"


def test_user_name_never_added_at_zero_probability(project_dir):
    write_project_config(project_dir, {"tts": {"user_name": "Sam", "name_include_probability": 0}})

    assert tts_announcer.maybe_address_user("Work complete") == "Work complete"


def test_subagent_message_mentions_agent(monkeypatch):
    monkeypatch.setattr(tts_announcer.random, "choice", lambda options: options[0])

    assert tts_announcer.get_subagent_message("reviewer") == "reviewer finished"
    assert tts_announcer.get_subagent_message() == "Subagent complete"
