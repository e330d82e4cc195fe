"""Tests for priority-list backend resolution."""

import json

import pytest

from conftest import FakeBackend
from settings import reset_settings_cache
from tts_backends.resolver import PROVIDERS, get_all_backends, resolve_tts_backend


def make_registry(available, created=None):
    """Registry of fake backends; names in `available` report available."""
    def factory(name):
        def build():
            if created is not None:
                created.append(name)
            return FakeBackend(name=name, available=name in available)
        return build
    return {name: factory(name) for name in ("a", "b", "c")}


def test_returns_first_available_in_priority_order():
    backend = resolve_tts_backend(["a", "b", "c"], make_registry({"b"}))
    assert backend.name == "b"


def test_priority_order_beats_registry_order():
    backend = resolve_tts_backend(["c", "a"], make_registry({"a", "c"}))
    assert backend.name == "c"


def test_stops_scanning_after_first_available():
    created = []
    resolve_tts_backend(["a", "b", "c"], make_registry({"b", "c"}, created))
    assert created == ["a", "b"]


def test_empty_priority_yields_none():
    assert resolve_tts_backend([], make_registry({"a", "b", "c"})) is None


def test_all_unavailable_yields_none():
    assert resolve_tts_backend(["a", "b", "c"], make_registry(set())) is None


def test_unknown_names_are_skipped():
    backend = resolve_tts_backend(["nope", "a"], make_registry({"a"}))
    assert backend.name == "a"


def test_priority_comes_from_settings(project_dir):
    (project_dir / ".claude").mkdir()
    (project_dir / ".claude" / "voice-hooks.json").write_text(json.dumps(
        {"tts": {"provider_priority": ["c", "b"]}}
    ))

    assert resolve_tts_backend(registry=make_registry({"b", "c"})).name == "c"


def test_cloud_backends_follow_api_keys(monkeypatch):
    assert resolve_tts_backend(["elevenlabs", "openai"]) is None

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    assert resolve_tts_backend(["elevenlabs", "openai"]).name == "openai"

    monkeypatch.setenv("ELEVENLABS_API_KEY", "el-test")
    assert resolve_tts_backend(["elevenlabs", "openai"]).name == "elevenlabs"


def test_blank_api_key_is_not_available(monkeypatch):
    monkeypatch.setenv("UNREAL_SPEECH_API_KEY", "   ")
    assert resolve_tts_backend(["unreal-speech"]) is None


def test_deepseek_needs_key_and_endpoint(monkeypatch, project_dir):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "ds-test")
    assert resolve_tts_backend(["deepseek"]) is None

    (project_dir / ".claude").mkdir()
    (project_dir / ".claude" / "voice-hooks.json").write_text(json.dumps(
        {"tts": {"deepseek": {"endpoint": "https://tts.example.com/v1/speech"}}}
    ))
    reset_settings_cache()

    assert resolve_tts_backend(["deepseek"]).name == "deepseek"


def test_get_all_backends_lists_every_registered_name():
    names = [entry["name"] for entry in get_all_backends()]
    assert sorted(names) == sorted(PROVIDERS)
    assert all(isinstance(entry["available"], bool) for entry in get_all_backends())


@pytest.mark.parametrize("name", sorted(PROVIDERS))
def test_registered_backends_carry_their_name(name):
    assert PROVIDERS[name]().name == name
