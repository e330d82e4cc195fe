#!/usr/bin/env python3
"""
Cross-platform audio playback utility for voice-hooks

Plays the MP3/WAV files returned by cloud TTS backends.
- macOS: afplay (native)
- Windows: pygame, winsound for WAV, PowerShell MediaPlayer last
- Linux: mpg123, ffplay, paplay, aplay for WAV, then pygame
"""

import os
import subprocess
import sys
import tempfile
import time
from pathlib import Path

from tts_backends.base import TTSError


class PlaybackError(TTSError):
    """No player could play the file."""


def play_audio_file(file_path: str, timeout: int = 120) -> None:
    """
    Play an audio file using platform-appropriate method.
    Returns when playback has finished.

    Raises:
        PlaybackError: if no player succeeded
    """
    if sys.platform == 'darwin':
        _play_macos(file_path, timeout)
    elif sys.platform == 'win32':
        _play_windows(file_path, timeout)
    else:
        _play_linux(file_path, timeout)


def play_audio_bytes(audio: bytes, suffix: str = '.mp3', timeout: int = 120) -> None:
    """Write audio to a temp file, play it, and always remove the file."""
    fd, tmp_path = tempfile.mkstemp(prefix='voice-hooks-tts-', suffix=suffix)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(audio)
        play_audio_file(tmp_path, timeout=timeout)
    finally:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass


def _run_player(args: list, timeout: int) -> bool:
    """Run one command-line player; False if missing or it failed."""
    try:
        result = subprocess.run(args, capture_output=True, timeout=timeout)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def _play_pygame(file_path: str, timeout: int) -> bool:
    """pygame mixer playback; pygame is the optional `audio` extra"""
    os.environ.setdefault('PYGAME_HIDE_SUPPORT_PROMPT', '1')
    try:
        import pygame
    except ImportError:
        return False

    try:
        pygame.mixer.init()
        pygame.mixer.music.load(file_path)
        pygame.mixer.music.play()

        # Wait for playback to complete or timeout
        start = time.time()
        while pygame.mixer.music.get_busy():
            if time.time() - start > timeout:
                pygame.mixer.music.stop()
                break
            time.sleep(0.1)
        pygame.mixer.quit()
        return True
    except pygame.error:
        return False


def _play_macos(file_path: str, timeout: int) -> None:
    """macOS audio playback using afplay"""
    if not _run_player(["afplay", file_path], timeout):
        raise PlaybackError(f"afplay could not play {file_path}")


def _play_windows(file_path: str, timeout: int) -> None:
    file_ext = Path(file_path).suffix.lower()

    if _play_pygame(file_path, timeout):
        return

    if file_ext == '.wav':
        import winsound
        try:
            winsound.PlaySound(file_path, winsound.SND_FILENAME)
            return
        except RuntimeError:
            pass

    # Build a file:// URI that PowerShell's [uri] understands
    file_uri = 'file:///' + file_path.replace('\\', '/')
    safe_uri = file_uri.replace("'", "''")
    ps_cmd = "\n".join([
        "Add-Type -AssemblyName PresentationCore",
        "$p = New-Object System.Windows.Media.MediaPlayer",
        f"$p.Open([uri]'{safe_uri}')",
        "Start-Sleep -Milliseconds 600",
        "$p.Play()",
        "$t = 0",
        "while (-not $p.NaturalDuration.HasTimeSpan -and $t -lt 50) { Start-Sleep -Milliseconds 100; $t++ }",
        "if ($p.NaturalDuration.HasTimeSpan) {",
        "  Start-Sleep -Milliseconds ([int]$p.NaturalDuration.TimeSpan.TotalMilliseconds + 250)",
        "} else {",
        "  Start-Sleep -Seconds 10",
        "}",
        "$p.Close()",
    ])
    if not _run_player(["powershell", "-NoProfile", "-Command", ps_cmd], timeout):
        raise PlaybackError(f"PowerShell MediaPlayer could not play {file_path}")


def _play_linux(file_path: str, timeout: int) -> None:
    file_ext = Path(file_path).suffix.lower()

    players = [
        ["mpg123", "-q", file_path],
        ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", file_path],
        ["paplay", file_path],
    ]
    if file_ext == '.wav':
        players.insert(0, ["aplay", "-q", file_path])

    for args in players:
        if _run_player(args, timeout):
            return

    if _play_pygame(file_path, timeout):
        return

    raise PlaybackError("No audio player found. Install mpg123, ffplay, or paplay.")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: audio_player.py <audio_file>")
        sys.exit(1)

    audio_file = sys.argv[1]
    print(f"Playing: {audio_file}")
    try:
        play_audio_file(audio_file)
    except PlaybackError as e:
        print(f"Playback failed: {e}")
        sys.exit(1)
    print("Playback succeeded")
