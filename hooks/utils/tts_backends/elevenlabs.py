#!/usr/bin/env python3
"""
ElevenLabs TTS backend.
Falls back to native speech within the same call when the account is out
of quota; every other failure is raised to the caller.
"""

import requests

from audio_player import play_audio_bytes
from hook_utils import append_to_debug_log
from settings import get_setting
from tts_backends.base import TTSBackend, TTSError, get_api_key
from tts_backends.native import NativeTTSBackend


API_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"


def is_quota_error(body: str) -> bool:
    lowered = body.lower()
    return 'quota_exceeded' in lowered or 'credits remaining' in lowered


class ElevenLabsTTSBackend(TTSBackend):
    name = "elevenlabs"

    def is_available(self) -> bool:
        return bool(get_api_key('ELEVENLABS_API_KEY'))

    def speak(self, text: str) -> None:
        voice_id = get_setting("tts.elevenlabs.voice_id")
        model_id = get_setting("tts.elevenlabs.model_id")

        try:
            response = requests.post(
                API_URL.format(voice_id=voice_id),
                headers={
                    'Accept': 'audio/mpeg',
                    'Content-Type': 'application/json',
                    'xi-api-key': get_api_key('ELEVENLABS_API_KEY'),
                },
                json={
                    'text': text,
                    'model_id': model_id,
                    'voice_settings': {'stability': 0.5, 'similarity_boost': 0.5},
                },
                timeout=get_setting("tts.request_timeout", 30),
            )
        except requests.RequestException as e:
            raise TTSError(f"ElevenLabs request failed: {e}") from e

        if not response.ok:
            body = response.text
            if is_quota_error(body):
                self._speak_native_fallback(text)
                return
            raise TTSError(f"ElevenLabs API error: {response.status_code} {body}")

        play_audio_bytes(response.content, suffix='.mp3')

    def _speak_native_fallback(self, text: str) -> None:
        append_to_debug_log("ElevenLabs quota exceeded, falling back to native TTS")
        native = NativeTTSBackend()
        if not native.is_available():
            raise TTSError("ElevenLabs quota exceeded and native TTS is unavailable")
        native.speak(text)
