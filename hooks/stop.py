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
from hook_utils import append_to_debug_log, append_to_json_log, ensure_session_log_dir, read_stdin_json
from tts_announcer import announce_for_hook, get_completion_message


def export_chat(transcript_path: str, log_dir: Path) -> None:
    """Copy the JSONL transcript into <log_dir>/chat.json as one array"""
    transcript = Path(transcript_path)
    if not transcript.exists():
        return

    chat_data = []
    with open(transcript, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                chat_data.append(json.loads(line))
            except json.JSONDecodeError:
                continue

    with open(log_dir / 'chat.json', 'w', encoding='utf-8') as f:
        json.dump(chat_data, f, indent=2)


def main():
    try:
        parser = argparse.ArgumentParser()
        parser.add_argument('--chat', action='store_true', help='Copy transcript to chat.json')
        parser.add_argument('--notify', action='store_true', help='Enable TTS completion announcement')
        args = parser.parse_args()

        input_data = read_stdin_json()
        session_id = input_data.get('session_id', '')

        log_dir = ensure_session_log_dir(session_id)
        append_to_json_log(log_dir / 'stop.json', input_data)

        if args.chat and input_data.get('transcript_path'):
            export_chat(input_data['transcript_path'], log_dir)

        append_to_debug_log(
            f"Stop hook called: notify={args.notify}, stop_hook_active={input_data.get('stop_hook_active', False)}"
        )

        if args.notify:
            announce_for_hook('stop', get_completion_message(), session_id)

        sys.exit(0)

    except json.JSONDecodeError:
        # Handle JSON decode errors gracefully
        sys.exit(0)
    except Exception as e:
        append_to_debug_log(f"Stop hook error: {e}")
        sys.exit(0)


if __name__ == '__main__':
    main()
