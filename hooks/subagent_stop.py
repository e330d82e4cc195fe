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
from tts_announcer import announce_for_hook, get_subagent_message


def main():
    try:
        parser = argparse.ArgumentParser()
        parser.add_argument('--notify', action='store_true', help='Enable TTS subagent announcement')
        args = parser.parse_args()

        input_data = read_stdin_json()
        session_id = input_data.get('session_id', '')
        agent_name = input_data.get('agent_name') or None
        agent_type = input_data.get('agent_type') or input_data.get('subagent_type') or None

        log_dir = ensure_session_log_dir(session_id)
        append_to_json_log(log_dir / 'subagent_stop.json', input_data)

        if args.notify:
            announce_for_hook(
                'subagent_stop',
                get_subagent_message(agent_name or agent_type),
                session_id,
                agent_name=agent_name,
                agent_type=agent_type,
            )

        sys.exit(0)

    except json.JSONDecodeError:
        sys.exit(0)
    except Exception as e:
        append_to_debug_log(f"SubagentStop hook error: {e}")
        sys.exit(0)


if __name__ == '__main__':
    main()
