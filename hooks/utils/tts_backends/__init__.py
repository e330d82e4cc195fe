"""
Speech backends. Resolution lives in tts_backends.resolver; this package
root stays import-light so audio_player can share the error types.
"""

from tts_backends.base import TTSBackend, TTSError

__all__ = ["TTSBackend", "TTSError"]
