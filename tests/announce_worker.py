"""
Subprocess body for the cross-process queue tests.

Usage: announce_worker.py <lock_path> <intervals_dir> <activity_path> <hold_seconds> [unqueued]

Announces once through the queue with a backend that writes its
[start, end] wall-clock interval to <intervals_dir>/<pid>.json. With
`unqueued` the queue is disabled and every worker speaks at once.
"""

import json
import os
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "hooks" / "utils"))

from activity_log import ActivityRecorder  # noqa: E402
from tts_queue import AnnouncementQueue  # noqa: E402


class IntervalBackend:
    name = "interval"

    def __init__(self, out_dir: Path, hold: float):
        self.out_dir = out_dir
        self.hold = hold

    def is_available(self):
        return True

    def speak(self, text):
        start = time.time()
        time.sleep(self.hold)
        end = time.time()
        with open(self.out_dir / f"{os.getpid()}.json", "w") as f:
            json.dump({"pid": os.getpid(), "start": start, "end": end}, f)


def main():
    lock_path, out_dir, activity_path, hold = sys.argv[1:5]
    queued = sys.argv[5:6] != ["unqueued"]
    queue = AnnouncementQueue(
        lock_path=Path(lock_path),
        enabled=queued,
        max_wait_ms=20000,
        poll_interval_ms=20,
        recorder=ActivityRecorder(Path(activity_path)),
    )
    ok = queue.announce(IntervalBackend(Path(out_dir), float(hold)), "worker says hello",
                        hook_type="stop", session_id=f"worker-{os.getpid()}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
