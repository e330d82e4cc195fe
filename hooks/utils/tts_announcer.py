#!/usr/bin/env python3
"""
Hook-side entry to the announcement subsystem.

Checks the TTS toggles, resolves a backend from the priority list and hands
the message to the cross-process queue. Nothing here may fail a hook.
"""

import random
from typing import Optional

from hook_utils import append_to_debug_log, get_project_name
from settings import get_setting, is_hook_tts_enabled
from tts_backends.resolver import resolve_tts_backend
from tts_queue import speak_with_lock


def maybe_address_user(message: str) -> str:
    """Prefix the configured user name with probability tts.name_include_probability"""
    user_name = (get_setting("tts.user_name") or "").strip()
    probability = get_setting("tts.name_include_probability", 0.3)
    if user_name and random.random() < probability:
        return f"{user_name}, {message[:1].lower()}{message[1:]}"
    return message


def get_completion_message() -> str:
    project_name = get_project_name()
    messages = [
        f"Work complete in {project_name}",
        f"All done with {project_name}",
        f"Task finished in {project_name}",
        f"{project_name} is ready for you",
        "Job complete",
        "Ready for your next instruction",
    ]
    return maybe_address_user(random.choice(messages))


def get_subagent_message(agent_name: Optional[str] = None) -> str:
    if agent_name:
        messages = [f"{agent_name} finished", f"{agent_name} agent is done", f"{agent_name} reported back"]
    else:
        messages = ["Subagent complete", "Subagent finished", "Subagent task done"]
    return random.choice(messages)


def announce_for_hook(hook_type: str, message: str, session_id: str = "unknown",
                      agent_name: Optional[str] = None, agent_type: Optional[str] = None) -> bool:
    """
    Announce a hook message if TTS is on for this hook.

    Args:
        hook_type: settings toggle name (stop, subagent_stop, notification, session_end)
        message: Text to speak (normalized by the queue)
        session_id: Host session identifier, for the activity log

    Returns:
        True if the message was spoken
    """
    try:
        if not message:
            return False

        if not is_hook_tts_enabled(hook_type):
            append_to_debug_log(f"{hook_type}: TTS disabled by config toggle")
            return False

        backend = resolve_tts_backend()
        if backend is None:
            append_to_debug_log(f"{hook_type}: no TTS provider available")
            return False

        append_to_debug_log(f"{hook_type}: speaking via {backend.name}: {message!r}")
        return speak_with_lock(
            backend,
            message,
            hook_type=hook_type,
            session_id=session_id or "unknown",
            agent_name=agent_name,
            agent_type=agent_type,
        )

    except Exception as e:
        # Fail silently for any other errors
        append_to_debug_log(f"{hook_type}: announcement aborted: {e}")
        return False
