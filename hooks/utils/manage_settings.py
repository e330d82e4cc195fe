#!/usr/bin/env python3
"""
voice-hooks Settings Management CLI

Usage:
    python manage_settings.py info                      # Show current settings info
    python manage_settings.py get <key>                 # Get a setting value
    python manage_settings.py set <key> <value>         # Set a project setting
    python manage_settings.py init                      # Create default project settings
    python manage_settings.py providers                 # Show TTS backends and availability
    python manage_settings.py speak [text]              # Speak a test phrase through the queue
    python manage_settings.py activity [--hook H] [--session S] [--limit N]
                                                        # Show the TTS activity log
    python manage_settings.py activity-clear            # Empty the TTS activity log
"""

import json
import sys

from activity_log import ActivityRecorder
from hook_utils import load_project_env
from settings import get_settings, get_setting, get_provider_priority, set_project_setting
from tts_backends.resolver import get_all_backends, resolve_tts_backend
from tts_queue import speak_with_lock


DEFAULT_TEST_PHRASE = "Voice hooks test. If you can hear this, announcements are working."


def show_info():
    """Show current settings information"""
    info = get_settings().get_settings_info()

    print("=== voice-hooks Settings Info ===")
    print(f"Project Root: {info['project_root']}")
    print()

    print("Settings Files:")
    for name, file_info in [("Project", info['project_settings']), ("Global", info['global_settings'])]:
        status = "EXISTS" if file_info['exists'] else "MISSING"
        print(f"  {name}: {file_info['path']}")
        print(f"    Status: {status}")
        if file_info['exists']:
            print(f"    Access: {'READABLE' if file_info.get('readable') else 'NOT READABLE'}")
        print()

    print("Effective Settings:")
    print(json.dumps(info['effective_settings'], indent=2))
    return True


def get_value(key):
    """Get a setting value"""
    value = get_setting(key)
    if value is None:
        print(f"Setting '{key}' not found")
        return False

    print(f"{key} = {json.dumps(value, indent=2)}")
    return True


def set_value(key, value_str):
    """Set a project setting value"""
    # Try to parse as JSON first, then fall back to string
    try:
        value = json.loads(value_str)
    except json.JSONDecodeError:
        value = value_str

    if not set_project_setting(key, value):
        print(f"Failed to set {key}")
        return False

    print(f"Set {key} = {json.dumps(value)}")
    return True


def init_project():
    """Initialize default project settings"""
    settings = get_settings()
    if not settings.create_default_project_settings():
        print("Failed to create project settings")
        return False

    project_path = settings.get_project_settings_path()
    print("Project settings at:")
    print(f"   {project_path}")
    with open(project_path, 'r', encoding='utf-8') as f:
        print(json.dumps(json.load(f), indent=2))
    return True


def show_providers():
    """List backends in priority order, then the rest"""
    priority = get_provider_priority()
    backends = {b['name']: b['available'] for b in get_all_backends()}
    selected = resolve_tts_backend()

    print("=== TTS Providers ===")
    for rank, name in enumerate(priority, 1):
        if name not in backends:
            print(f"  {rank}. {name:<14} unknown (ignored)")
            continue
        marker = ">>> " if selected and selected.name == name else ""
        state = "available" if backends[name] else "unavailable"
        print(f"  {rank}. {name:<14} {state} {marker}".rstrip())

    unlisted = [name for name in backends if name not in priority]
    if unlisted:
        print()
        print("Not in tts.provider_priority:")
        for name in unlisted:
            print(f"     {name:<14} {'available' if backends[name] else 'unavailable'}")

    if selected is None:
        print()
        print("No provider available: announcements are skipped")
    return True


def speak_test(text):
    """Speak a phrase exactly as a hook would"""
    backend = resolve_tts_backend()
    if backend is None:
        print("No TTS provider available")
        return False

    print(f"Speaking via {backend.name}: {text}")
    if speak_with_lock(backend, text, hook_type="test", session_id="manage_settings"):
        print("Done")
        return True

    failed = ActivityRecorder().read_entries(hook_type="test")
    error = failed[-1].get('error') if failed else None
    print(f"Speech failed: {error or 'unknown error'}")
    return False


def parse_activity_args(argv):
    options = {"hook": None, "session": None, "limit": 20}
    i = 0
    while i < len(argv):
        flag = argv[i].lstrip('-')
        if flag in options and i + 1 < len(argv):
            options[flag] = argv[i + 1]
            i += 2
        else:
            raise ValueError(f"Unknown activity option: {argv[i]}")
    options["limit"] = int(options["limit"])
    return options


def show_activity(argv):
    """Print recent activity log entries, newest last"""
    try:
        options = parse_activity_args(argv)
    except ValueError as e:
        print(e)
        return False

    recorder = ActivityRecorder()
    entries = recorder.read_entries(hook_type=options["hook"], session_id=options["session"])
    if options["limit"] > 0:
        entries = entries[-options["limit"]:]

    print(f"=== TTS Activity ({recorder.path}) ===")
    if not entries:
        print("No entries")
        return True

    for entry in entries:
        status = "ok  " if entry.get('success') else "FAIL"
        print(f"{entry.get('timestamp', '?')} {status} {entry.get('hook_type', '?'):<14} "
              f"{entry.get('provider', '?'):<14} {entry.get('duration_ms', 0):>6}ms  {entry.get('message', '')}")
        if entry.get('error'):
            print(f"    error: {entry['error']}")
    return True


def clear_activity():
    recorder = ActivityRecorder()
    recorder.clear()
    print(f"Cleared {recorder.path}")
    return True


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return 0

    load_project_env()
    command = sys.argv[1].lower()

    if command == "info":
        ok = show_info()
    elif command == "get":
        if len(sys.argv) < 3:
            print("Usage: manage_settings.py get <key>")
            return 1
        ok = get_value(sys.argv[2])
    elif command == "set":
        if len(sys.argv) < 4:
            print("Usage: manage_settings.py set <key> <value>")
            return 1
        ok = set_value(sys.argv[2], sys.argv[3])
    elif command == "init":
        ok = init_project()
    elif command == "providers":
        ok = show_providers()
    elif command == "speak":
        ok = speak_test(" ".join(sys.argv[2:]) or DEFAULT_TEST_PHRASE)
    elif command == "activity":
        ok = show_activity(sys.argv[2:])
    elif command == "activity-clear":
        ok = clear_activity()
    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
