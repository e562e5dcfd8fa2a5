"""core/events.py — Trigger events and the bus that carries them.

The proximity tracker only *reports* zone edges; whatever reacts to
them (the prompt controller, the debug overlay, a future sound cue)
subscribes here instead of being called directly.  The bus lives on
the world as a resource::

    bus = world.res(EventBus)
    bus.subscribe("ZoneEntered", controller.on_enter)
    bus.emit(ZoneEntered(zone=zone))
    bus.drain()          # once per frame, after the proximity system

Events are plain dataclasses.  ``emit()`` only queues; ``drain()``
delivers in FIFO order, and anything a handler emits is delivered in
the same drain.
"""

from __future__ import annotations
import traceback
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from logic.zones import TriggerZone


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class ZoneEntered:
    """The player started a dwell inside / near a trigger zone."""
    zone: TriggerZone


@dataclass
class ZoneExited:
    """The player's dwell in a trigger zone ended."""
    zone: TriggerZone


@dataclass
class AffordanceActivated:
    """The interact intent fired while the affordance was visible."""
    zone: TriggerZone


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

ErrorHook = Callable[[str, Exception], None]


class EventBus:
    """Queued publish/subscribe keyed by event class name.

    A handler that raises is reported (console traceback, then
    ``on_error(event_name, exc)`` if given) and the remaining handlers
    still run.  ``max_passes`` bounds handler-emits-event chains.
    """

    def __init__(self, on_error: ErrorHook | None = None, max_passes: int = 1000):
        self.on_error = on_error
        self.max_passes = max_passes
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._delivered: dict[str, int] = defaultdict(int)
        self.errors = 0

    def emit(self, event) -> None:
        self._queue.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Call *handler(event)* for every event whose class is *event_type*."""
        self._subs[event_type].append(handler)

    def drain(self) -> int:
        """Deliver everything queued.  Returns the number of events."""
        processed = 0
        for _ in range(self.max_passes):
            if not self._queue:
                break
            batch, self._queue = self._queue, []
            for event in batch:
                self._deliver(event)
            processed += len(batch)
        return processed

    def _deliver(self, event) -> None:
        name = type(event).__name__
        self._delivered[name] += 1
        for handler in self._subs.get(name, ()):
            try:
                handler(event)
            except Exception as exc:
                self.errors += 1
                print(f"[EVENT] {name} handler {getattr(handler, '__name__', handler)!s} failed: {exc}")
                traceback.print_exc()
                if self.on_error is not None:
                    self.on_error(name, exc)

    def clear(self) -> None:
        """Drop queued events without delivering them."""
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Delivered-event counts by type since construction."""
        return dict(self._delivered)

    def pending_count(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"
