#!/usr/bin/env python3
"""
On-device TTS through pyttsx3 (SAPI5 / NSSpeechSynthesizer / espeak).
"""

import importlib.util

from settings import get_setting
from tts_backends.base import TTSBackend, TTSError


class Pyttsx3TTSBackend(TTSBackend):
    name = "pyttsx3"

    def is_available(self) -> bool:
        return importlib.util.find_spec("pyttsx3") is not None

    def speak(self, text: str) -> None:
        import pyttsx3

        try:
            engine = pyttsx3.init()
            engine.setProperty('rate', get_setting("tts.pyttsx3.rate", 180))
            voice = get_setting("tts.pyttsx3.voice")
            if voice:
                engine.setProperty('voice', voice)
            engine.say(text)
            engine.runAndWait()
        except (RuntimeError, OSError) as e:
            raise TTSError(f"pyttsx3 failed: {e}") from e
