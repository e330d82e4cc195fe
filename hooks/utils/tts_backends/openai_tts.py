#!/usr/bin/env python3
"""
OpenAI TTS backend (gpt-4o-mini-tts by default).
"""

import os
import tempfile

from audio_player import play_audio_file
from settings import get_setting
from tts_backends.base import TTSBackend, TTSError, get_api_key


class OpenAITTSBackend(TTSBackend):
    name = "openai"

    def is_available(self) -> bool:
        return bool(get_api_key('OPENAI_API_KEY'))

    def speak(self, text: str) -> None:
        # Imported here: the SDK is slow to load and most hooks never need it
        from openai import OpenAI, OpenAIError

        client = OpenAI(
            api_key=get_api_key('OPENAI_API_KEY'),
            timeout=get_setting("tts.request_timeout", 30),
        )

        fd, tmp_path = tempfile.mkstemp(prefix='voice-hooks-tts-oai-', suffix='.mp3')
        os.close(fd)
        try:
            try:
                with client.audio.speech.with_streaming_response.create(
                    model=get_setting("tts.openai.model"),
                    voice=get_setting("tts.openai.voice"),
                    input=text,
                    response_format="mp3",
                ) as response:
                    response.stream_to_file(tmp_path)
            except OpenAIError as e:
                raise TTSError(f"OpenAI TTS API error: {e}") from e

            play_audio_file(tmp_path)
        finally:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
