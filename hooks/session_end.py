#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "python-dotenv",
#     "psutil",
#     "requests",
#     "openai",
#     "pyttsx3",
# ]
# ///

import argparse
import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent / 'utils'))
from hook_utils import append_to_debug_log, append_to_json_log, ensure_session_log_dir, get_project_name, read_stdin_json
from tts_announcer import announce_for_hook


REASON_PHRASES = {
    'clear': 'cleared',
    'logout': 'logged out',
    'prompt_input_exit': 'exited',
}


def create_session_end_message(reason: str) -> str:
    phrase = REASON_PHRASES.get(reason, 'ended')
    return f"Session {phrase} in {get_project_name()}"


def main():
    try:
        parser = argparse.ArgumentParser()
        parser.add_argument('--notify', action='store_true', help='Enable TTS session end announcement')
        args = parser.parse_args()

        input_data = read_stdin_json()
        session_id = input_data.get('session_id', '')

        log_dir = ensure_session_log_dir(session_id)
        append_to_json_log(log_dir / 'session_end.json', input_data)

        if args.notify:
            announce_for_hook('session_end', create_session_end_message(input_data.get('reason', '')), session_id)

        sys.exit(0)

    except json.JSONDecodeError:
        sys.exit(0)
    except Exception as e:
        append_to_debug_log(f"SessionEnd hook error: {e}")
        sys.exit(0)


if __name__ == '__main__':
    main()
