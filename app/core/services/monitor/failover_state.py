"""
Failover State — shared, lock-guarded flag.

Written by the monitor loop once per completed probe round, read by every
home page request. Sync route handlers run in the threadpool while the
monitor runs on the event loop, so access goes through a threading lock.
"""

from __future__ import annotations

import threading

PRIMARY = "primary"
FALLBACK = "fallback"


class FailoverState:
    """Single-writer, many-reader failover flag."""

    def __init__(self, active: bool = False) -> None:
        self._lock = threading.Lock()
        self._active = bool(active)

    def get(self) -> bool:
        with self._lock:
            return self._active

    def set(self, active: bool) -> bool:
        """Publish a new value; return True when it differs from the old one."""
        value = bool(active)
        with self._lock:
            changed = value != self._active
            self._active = value
            return changed

    @property
    def mode(self) -> str:
        return FALLBACK if self.get() else PRIMARY

    def __repr__(self) -> str:
        return f"FailoverState(mode={self.mode!r})"
