"""core/diag.py — Rate-limited diagnostic log.

A ring-buffer resource that records map-loading problems, degraded
subsystems and trigger transitions.  Read by the debug overlay (Tab)
to give the developer a live feed of what the scene decided and why.

Usage:
    log = world.res(DiagLog)
    log.record("gate", "no walkable layer — movement unconstrained")

Repeats of the same ``(cat, msg)`` inside ``min_interval`` seconds are
dropped, so per-frame conditions can be reported from the tick without
flooding the console.

Each entry is a dict:
    {"t": float, "cat": str, "msg": str, "details": dict | None}
"""

from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Callable

from core.constants import DIAG_MIN_INTERVAL, DIAG_ECHO


@dataclass
class DiagLog:
    """Ring-buffer of scene diagnostics for the dev overlay."""

    entries: list[dict] = field(default_factory=list)
    max_entries: int = 200
    min_interval: float = DIAG_MIN_INTERVAL
    echo: bool = DIAG_ECHO
    clock: Callable[[], float] = time.monotonic
    _paused: bool = False
    _last_seen: dict[tuple[str, str], float] = field(default_factory=dict)
    suppressed: int = 0

    # If non-empty, only entries whose ``cat`` is in the set are kept.
    cat_filter: set[str] = field(default_factory=set)

    def record(self, cat: str, msg: str, *,
               details: dict | None = None) -> bool:
        """Store one entry.  Returns False when filtered or throttled."""
        if self._paused:
            return False
        if self.cat_filter and cat not in self.cat_filter:
            return False
        now = self.clock()
        key = (cat, msg)
        last = self._last_seen.get(key)
        if last is not None and now - last < self.min_interval:
            self.suppressed += 1
            return False
        self._last_seen[key] = now
        entry = {
            "t": now,
            "cat": cat,
            "msg": msg,
            "details": details,
        }
        self.entries.append(entry)
        if len(self.entries) > self.max_entries:
            self.entries = self.entries[-self.max_entries:]
        if self.echo:
            print(f"[{cat.upper()}] {msg}")
        return True

    def clear(self):
        self.entries.clear()
        self._last_seen.clear()
        self.suppressed = 0

    def pause(self):
        self._paused = True

    def resume(self):
        self._paused = False

    def recent(self, n: int = 20) -> list[dict]:
        """Return the *n* most recent entries (newest last)."""
        return self.entries[-n:] if n > 0 else []

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        """Return last *n* entries in a category."""
        return [e for e in self.entries if e["cat"] == cat][-n:]
