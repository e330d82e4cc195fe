#!/usr/bin/env python3
"""
Native platform TTS, no API key required.

- macOS:   say -v <voice> -r <rate>
- Windows: PowerShell System.Speech
- Linux:   espeak, or spd-say
"""

import shutil
import subprocess
import sys
from typing import List, Optional

from settings import get_setting
from tts_backends.base import TTSBackend, TTSError


NATIVE_TIMEOUT = 120


def get_native_command(text: str, voice: Optional[str] = None, rate: Optional[int] = None) -> Optional[List[str]]:
    """Get the platform-specific TTS command, or None if nothing can speak."""
    platform = sys.platform

    if platform == "darwin":
        if not shutil.which("say"):
            return None
        args = ["say"]
        if voice:
            args += ["-v", voice]
        if rate:
            args += ["-r", str(rate)]
        return args + [text]

    if platform == "win32":
        if not shutil.which("powershell"):
            return None
        # Map the macOS words-per-minute rate (~175) onto the -10..10 scale
        win_rate = 0
        if rate:
            win_rate = max(-10, min(10, round((rate - 175) / 25)))
        escaped = text.replace("'", "''")
        script = "\n".join([
            "Add-Type -AssemblyName System.Speech",
            "$s = New-Object System.Speech.Synthesis.SpeechSynthesizer",
            f"$s.Rate = {win_rate}",
            f"$s.Speak('{escaped}')",
            "$s.Dispose()",
        ])
        return ["powershell", "-NoProfile", "-Command", script]

    if platform.startswith("linux"):
        if shutil.which("espeak"):
            args = ["espeak"]
            if rate:
                args += ["-s", str(rate)]
            return args + [text]
        if shutil.which("spd-say"):
            return ["spd-say", "--wait", text]

    return None


class NativeTTSBackend(TTSBackend):
    name = "native"

    def is_available(self) -> bool:
        return get_native_command("availability check") is not None

    def speak(self, text: str) -> None:
        # The macOS voice name means nothing to espeak or System.Speech
        voice = get_setting("tts.native.voice") if sys.platform == "darwin" else None
        rate = get_setting("tts.native.rate")

        command = get_native_command(text, voice, rate)
        if command is None:
            raise TTSError(f"No native speech command available on {sys.platform}")

        try:
            result = subprocess.run(command, capture_output=True, timeout=NATIVE_TIMEOUT)
        except subprocess.TimeoutExpired as e:
            raise TTSError(f"{command[0]} timed out after {NATIVE_TIMEOUT}s") from e
        except OSError as e:
            raise TTSError(f"{command[0]} could not be started: {e}") from e

        if result.returncode != 0:
            raise TTSError(f"{command[0]} exited with code {result.returncode}")
