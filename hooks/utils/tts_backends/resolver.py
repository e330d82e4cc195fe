#!/usr/bin/env python3
"""
TTS backend resolver.
Selects the first available backend from the configured priority list.
"""

from typing import Callable, Dict, List, Optional

from hook_utils import load_project_env
from settings import get_provider_priority
from tts_backends.base import TTSBackend
from tts_backends.elevenlabs import ElevenLabsTTSBackend
from tts_backends.http_backends import DeepSeekTTSBackend, UnrealSpeechTTSBackend
from tts_backends.native import NativeTTSBackend
from tts_backends.openai_tts import OpenAITTSBackend
from tts_backends.pyttsx3_backend import Pyttsx3TTSBackend


# Backend name -> factory. Order is irrelevant; the priority list decides.
PROVIDERS: Dict[str, Callable[[], TTSBackend]] = {
    NativeTTSBackend.name: NativeTTSBackend,
    Pyttsx3TTSBackend.name: Pyttsx3TTSBackend,
    ElevenLabsTTSBackend.name: ElevenLabsTTSBackend,
    OpenAITTSBackend.name: OpenAITTSBackend,
    UnrealSpeechTTSBackend.name: UnrealSpeechTTSBackend,
    DeepSeekTTSBackend.name: DeepSeekTTSBackend,
}


def resolve_tts_backend(priority: Optional[List[str]] = None,
                        registry: Optional[Dict[str, Callable[[], TTSBackend]]] = None) -> Optional[TTSBackend]:
    """
    Return the first available backend named in the priority list.

    Args:
        priority: Ordered backend names; defaults to tts.provider_priority
        registry: Name -> factory map; defaults to PROVIDERS

    Returns:
        A backend instance, or None when nothing in the list is registered
        and available
    """
    load_project_env()

    if priority is None:
        priority = get_provider_priority()
    if registry is None:
        registry = PROVIDERS

    for name in priority:
        factory = registry.get(name)
        if factory is None:
            continue

        backend = factory()
        if backend.is_available():
            return backend

    return None


def get_all_backends(registry: Optional[Dict[str, Callable[[], TTSBackend]]] = None) -> List[dict]:
    """Every registered backend with its current availability."""
    load_project_env()

    if registry is None:
        registry = PROVIDERS
    return [{"name": name, "available": factory().is_available()}
            for name, factory in registry.items()]
