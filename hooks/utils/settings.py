#!/usr/bin/env python3
"""
Settings Management for voice-hooks

Implements hierarchical settings system:
project > global > defaults

Settings files:
- <project>/.claude/voice-hooks.json (project-specific overrides)
- hooks/voice-hooks.json, or $VOICE_HOOKS_GLOBAL_CONFIG (global config)
- Built-in defaults (fallback)
"""

import copy
import json
import os
from pathlib import Path
from typing import Dict, Any

from hook_utils import append_to_debug_log, detect_project_root, write_json_atomic


class VoiceHooksSettings:
    """Hierarchical settings manager for voice-hooks"""

    # Default settings schema
    DEFAULT_SETTINGS = {
        "project": {
            "name": None
        },
        "tts": {
            "enabled": True,
            "hook_toggles": {
                "stop": True,
                "subagent_stop": True,
                "notification": True,
                "session_end": True
            },
            "user_name": "",
            "name_include_probability": 0.3,
            "provider_priority": ["native", "elevenlabs", "openai", "unreal-speech", "deepseek", "pyttsx3"],
            "provider_priority_options": "native, pyttsx3, elevenlabs, openai, unreal-speech, deepseek",
            "native": {"voice": "Samantha", "rate": 180},
            "pyttsx3": {"voice": None, "rate": 180},
            "elevenlabs": {"voice_id": "XrExE9yKIg1WjnnlVkGX", "model_id": "eleven_turbo_v2_5"},
            "openai": {"voice": "nova", "model": "gpt-4o-mini-tts"},
            "unreal_speech": {
                "endpoint": "https://api.v8.unrealspeech.com/stream",
                "voice": "Chloe",
                "temperature": 0.25
            },
            "deepseek": {"endpoint": ""},
            "request_timeout": 30,
            "queue": {
                "enabled": True,
                "max_wait_ms": 30000,
                "poll_interval_ms": 200
            }
        }
    }

    def __init__(self):
        self._settings_cache = None
        self._project_root = None

    def get_project_root(self) -> Path:
        """Get and cache project root"""
        if self._project_root is None:
            self._project_root = detect_project_root()
        return self._project_root

    def get_project_settings_path(self) -> Path:
        """Get path to project-specific settings file"""
        return self.get_project_root() / ".claude" / "voice-hooks.json"

    def get_global_settings_path(self) -> Path:
        """Get path to global settings file"""
        override = os.getenv('VOICE_HOOKS_GLOBAL_CONFIG')
        if override:
            return Path(override)
        return Path(__file__).parent.parent / "voice-hooks.json"

    def load_settings(self, force_reload: bool = False) -> Dict[str, Any]:
        """
        Load settings with hierarchy: project > global > defaults

        Args:
            force_reload: If True, ignore cache and reload from files

        Returns:
            Dict containing merged settings
        """
        if self._settings_cache is not None and not force_reload:
            return self._settings_cache

        settings = copy.deepcopy(self.DEFAULT_SETTINGS)

        # Layer 1: Global settings, Layer 2: Project settings
        for label, path in (("global", self.get_global_settings_path()),
                            ("project", self.get_project_settings_path())):
            if not path.exists():
                continue
            try:
                overrides = self._read_file(path)
                if isinstance(overrides, dict):
                    settings = self._deep_merge(settings, overrides)
                else:
                    self._log_error(f"Ignoring {label} settings: top level is not an object")
            except (json.JSONDecodeError, OSError) as e:
                self._log_error(f"Failed to load {label} settings: {e}")

        self._settings_cache = settings
        return settings

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with dot notation support

        Args:
            key: Setting key (supports dot notation like "tts.queue.max_wait_ms")
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        value = self.load_settings()

        try:
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set_project_setting(self, key: str, value: Any) -> bool:
        """
        Write one dotted key into the project file, creating parents as needed.

        Returns:
            True once the file is rewritten; False if it could not be read
            or written (the reason goes to the debug log)
        """
        path = self.get_project_settings_path()
        try:
            overrides = self._read_file(path) if path.exists() else {}
            if not isinstance(overrides, dict):
                overrides = {}

            *parents, leaf = key.split('.')
            node = overrides
            for part in parents:
                if not isinstance(node.get(part), dict):
                    node[part] = {}
                node = node[part]
            node[leaf] = value

            write_json_atomic(path, overrides)
        except (OSError, json.JSONDecodeError, TypeError) as e:
            self._log_error(f"could not set {key} in {path}: {e}")
            return False

        self.invalidate()
        return True

    def create_default_project_settings(self) -> bool:
        """Seed the project file with the commonly tuned keys; an existing file is left alone."""
        path = self.get_project_settings_path()
        if path.exists():
            return True

        starter = {
            "tts": {
                "enabled": True,
                "provider_priority": list(self.DEFAULT_SETTINGS["tts"]["provider_priority"]),
                "queue": {"enabled": True, "max_wait_ms": self.DEFAULT_SETTINGS["tts"]["queue"]["max_wait_ms"]},
            }
        }
        try:
            write_json_atomic(path, starter)
        except OSError as e:
            self._log_error(f"could not create {path}: {e}")
            return False

        self.invalidate()
        return True

    @staticmethod
    def _read_file(path: Path):
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def get_settings_info(self) -> Dict[str, Any]:
        """
        Get information about current settings sources

        Returns:
            Dict with settings file paths and status
        """
        project_path = self.get_project_settings_path()
        global_path = self.get_global_settings_path()

        return {
            "project_root": str(self.get_project_root()),
            "project_settings": {
                "path": str(project_path),
                "exists": project_path.exists(),
                "readable": project_path.exists() and os.access(project_path, os.R_OK)
            },
            "global_settings": {
                "path": str(global_path),
                "exists": global_path.exists(),
                "readable": global_path.exists() and os.access(global_path, os.R_OK)
            },
            "effective_settings": self.load_settings()
        }

    def invalidate(self):
        """Drop cached settings and project root so the next read hits disk"""
        self._settings_cache = None
        self._project_root = None

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries. Lists and scalars in override replace
        the base value; nested dicts merge key by key.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _log_error(self, message: str):
        append_to_debug_log(f"settings: {message}")


# Global settings instance
_settings_instance = None

def get_settings() -> VoiceHooksSettings:
    """Get singleton settings instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = VoiceHooksSettings()
    return _settings_instance


def reset_settings_cache() -> None:
    """Forget cached settings (after an edit, or between tests)"""
    get_settings().invalidate()


def get_setting(key: str, default: Any = None) -> Any:
    """Convenience function to get a setting value"""
    return get_settings().get(key, default)


def set_project_setting(key: str, value: Any) -> bool:
    """Convenience function to set a project setting"""
    return get_settings().set_project_setting(key, value)


def is_tts_enabled() -> bool:
    """Check if TTS is enabled globally"""
    return bool(get_setting("tts.enabled", True))


def is_hook_tts_enabled(hook_type: str) -> bool:
    """Check the global switch and the per-hook toggle"""
    if not is_tts_enabled():
        return False
    return bool(get_setting(f"tts.hook_toggles.{hook_type}", True))


def get_provider_priority() -> list:
    """Ordered backend names from settings; a bad value yields an empty list"""
    priority = get_setting("tts.provider_priority", [])
    if not isinstance(priority, list):
        return []
    return [name for name in priority if isinstance(name, str)]


if __name__ == "__main__":
    # Test the settings system
    print("Settings Info:")
    print(json.dumps(get_settings().get_settings_info(), indent=2))

    print(f"\nTTS Enabled: {is_tts_enabled()}")
    print(f"Provider Priority: {get_provider_priority()}")
    print(f"Queue: {get_setting('tts.queue')}")
