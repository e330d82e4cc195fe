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
import random
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent / 'utils'))
from hook_utils import append_to_debug_log, append_to_json_log, ensure_session_log_dir, read_stdin_json
from tts_announcer import announce_for_hook, maybe_address_user


# The host sends this whenever it goes idle; announcing it every time is noise
IDLE_PROMPT = 'Claude is waiting for your input'


def create_notification_message(input_data: dict) -> str:
    """Spoken form of the notification, falling back to a varied prompt"""
    message = (input_data.get('message') or '').strip()
    if message:
        return message

    fallback_messages = [
        "Ready to help",
        "Awaiting your command",
        "Standing by for instructions",
        "Your input is needed",
    ]
    return maybe_address_user(random.choice(fallback_messages))


def main():
    try:
        parser = argparse.ArgumentParser()
        parser.add_argument('--notify', action='store_true', help='Enable TTS notifications')
        args = parser.parse_args()

        input_data = read_stdin_json()
        session_id = input_data.get('session_id', '')

        log_dir = ensure_session_log_dir(session_id)
        append_to_json_log(log_dir / 'notification.json', input_data)

        if args.notify and input_data.get('message') != IDLE_PROMPT:
            # Queues behind whatever is speaking; never cuts it off
            announce_for_hook('notification', create_notification_message(input_data), session_id)

        sys.exit(0)

    except json.JSONDecodeError:
        sys.exit(0)
    except Exception as e:
        append_to_debug_log(f"Notification hook error: {e}")
        sys.exit(0)


if __name__ == '__main__':
    main()
