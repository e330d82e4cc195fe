#!/usr/bin/env python3
"""
Speech backend interface shared by every TTS provider.
"""

import os


class TTSError(Exception):
    """A backend could not produce speech."""


class TTSBackend:
    """
    A named text-to-speech provider.

    Subclasses set `name` and implement:
      is_available() - side-effect free capability check (env vars,
                       settings, platform, executables on PATH)
      speak(text)    - returns once playback has finished, raises on failure
    """

    name = ""

    def is_available(self) -> bool:
        raise NotImplementedError

    def speak(self, text: str) -> None:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} name={self.name!r}>"


def get_api_key(env_var: str) -> str:
    """Read an API key, treating blank values as missing"""
    return (os.getenv(env_var) or '').strip()
