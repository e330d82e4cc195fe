#!/usr/bin/env python3
"""
Cross-platform process utilities for voice-hooks

- is_pid_alive: liveness check used to detect stale announcement locks
"""

import os
import sys

import psutil


def is_pid_alive(pid: int) -> bool:
    """
    Return True if a process with this PID is currently running.

    Zombies count as dead: a holder that exited without being reaped can
    never release its lock.
    """
    if pid <= 0:
        return False
    try:
        if not psutil.pid_exists(pid):
            return False
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        # Exists but belongs to someone else
        return True


if __name__ == "__main__":
    print(f"Platform: {sys.platform}")
    pid = int(sys.argv[1]) if len(sys.argv) > 1 else os.getpid()
    print(f"PID {pid} alive: {is_pid_alive(pid)}")
