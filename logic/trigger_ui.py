"""logic/trigger_ui.py — Show the interact prompt for the active zone.

Listens for ``ZoneEntered`` / ``ZoneExited`` on the event bus and drives
an affordance sink — anything with ``show(anchor)`` and ``hide()``.
The prompt is pinned above the zone (centred on it, ``anchor_offset``
pixels above its top edge), not above the player.

When the player presses interact while the prompt is up, the single
action callback runs.  What the action does is the scene's business.
"""

from __future__ import annotations
from typing import Callable, Protocol

from core.constants import ANCHOR_OFFSET
from core.events import AffordanceActivated, EventBus, ZoneEntered, ZoneExited
from logic.zones import TriggerZone


class AffordanceSink(Protocol):
    def show(self, anchor: tuple[float, float]) -> None: ...
    def hide(self) -> None: ...


def anchor_for(zone: TriggerZone, offset: float = ANCHOR_OFFSET) -> tuple[float, float]:
    return zone.center[0], zone.bounds.top - offset


class TriggerUIController:
    def __init__(self, sink: AffordanceSink,
                 action: Callable[[], None] | None = None,
                 anchor_offset: float = ANCHOR_OFFSET):
        self.sink = sink
        self.action = action
        self.anchor_offset = anchor_offset
        self.zone: TriggerZone | None = None
        self._bus: EventBus | None = None

    @property
    def visible(self) -> bool:
        return self.zone is not None

    def attach(self, bus: EventBus) -> None:
        self._bus = bus
        bus.subscribe("ZoneEntered", self.on_enter)
        bus.subscribe("ZoneExited", self.on_exit)

    def on_enter(self, event: ZoneEntered) -> None:
        self.zone = event.zone
        self.sink.show(anchor_for(event.zone, self.anchor_offset))

    def on_exit(self, event: ZoneExited) -> None:
        if self.zone is not event.zone:
            return
        self.zone = None
        self.sink.hide()

    def activate(self) -> bool:
        """Run the action if the prompt is showing.  Returns True if it ran."""
        if self.zone is None:
            return False
        if self._bus is not None:
            self._bus.emit(AffordanceActivated(zone=self.zone))
        if self.action is not None:
            self.action()
        return True
