#!/usr/bin/env python3
"""
Bearer-token HTTP TTS backends that return MP3 audio: UnrealSpeech and a
configurable DeepSeek-compatible endpoint.
"""

import requests

from audio_player import play_audio_bytes
from settings import get_setting
from tts_backends.base import TTSBackend, TTSError, get_api_key


def post_for_audio(label: str, endpoint: str, api_key: str, payload: dict) -> bytes:
    """POST a JSON payload and return the audio body, raising TTSError on failure."""
    try:
        response = requests.post(
            endpoint,
            headers={
                'Authorization': f'Bearer {api_key}',
                'Content-Type': 'application/json',
            },
            json=payload,
            timeout=get_setting("tts.request_timeout", 30),
        )
    except requests.RequestException as e:
        raise TTSError(f"{label} request failed: {e}") from e

    if not response.ok:
        raise TTSError(f"{label} API error: {response.status_code}")
    return response.content


class UnrealSpeechTTSBackend(TTSBackend):
    name = "unreal-speech"

    def is_available(self) -> bool:
        return bool(get_api_key('UNREAL_SPEECH_API_KEY'))

    def speak(self, text: str) -> None:
        audio = post_for_audio(
            "UnrealSpeech",
            get_setting("tts.unreal_speech.endpoint"),
            get_api_key('UNREAL_SPEECH_API_KEY'),
            {
                'Text': text,
                'VoiceId': get_setting("tts.unreal_speech.voice"),
                'Bitrate': '192k',
                'Speed': '0',
                'Pitch': '1',
                'Temperature': get_setting("tts.unreal_speech.temperature"),
            },
        )
        play_audio_bytes(audio, suffix='.mp3')


class DeepSeekTTSBackend(TTSBackend):
    name = "deepseek"

    def is_available(self) -> bool:
        return bool(get_api_key('DEEPSEEK_API_KEY')) and bool(get_setting("tts.deepseek.endpoint"))

    def speak(self, text: str) -> None:
        endpoint = get_setting("tts.deepseek.endpoint")
        if not endpoint:
            raise TTSError("DeepSeek TTS endpoint not configured (tts.deepseek.endpoint)")

        audio = post_for_audio(
            "DeepSeek TTS",
            endpoint,
            get_api_key('DEEPSEEK_API_KEY'),
            {'text': text, 'response_format': 'mp3'},
        )
        play_audio_bytes(audio, suffix='.mp3')
