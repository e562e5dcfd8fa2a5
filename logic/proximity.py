"""logic/proximity.py — Which trigger zone is the player at?

A two-state machine evaluated once per frame:

    Idle ──enter(i)──▶ InZone(i) ──exit(i)──▶ Idle
                       InZone(i) ──exit(i), enter(j)──▶ InZone(j)

A zone is "satisfied" when the player stands inside its rectangle, or
within ``threshold`` pixels of its centre.  Zones are tested in list
order and the first satisfied one wins, even if a later zone is closer.

    tracker = ProximityTracker(zones, threshold)
    for event in tracker.update(player_x, player_y):
        bus.emit(event)
"""

from __future__ import annotations
import math

from core.events import ZoneEntered, ZoneExited
from logic.zones import TriggerZone


class ProximityTracker:
    """Per-frame zone membership with enter/exit edge detection."""

    def __init__(self, zones: list[TriggerZone], threshold: float):
        self.zones: tuple[TriggerZone, ...] = tuple(zones)
        self.threshold = float(threshold)
        self.active: TriggerZone | None = None
        self.inside: list[bool] = [False] * len(self.zones)
        self._slot = {id(z): i for i, z in enumerate(self.zones)}
        # Number of centre-distance evaluations since construction
        self.distance_checks = 0

    @property
    def idle(self) -> bool:
        return self.active is None

    @property
    def state(self) -> str:
        return "idle" if self.active is None else f"in_zone({self.active.id})"

    def resolve(self, x: float, y: float) -> TriggerZone | None:
        """The first zone satisfied by (x, y), or ``None``."""
        for zone in self.zones:
            if zone.bounds.contains(x, y):
                return zone
            self.distance_checks += 1
            cx, cy = zone.center
            if math.hypot(x - cx, y - cy) <= self.threshold:
                return zone
        return None

    def update(self, x: float, y: float) -> list[ZoneEntered | ZoneExited]:
        """Advance one frame; return the edge events it produced."""
        if not self.zones:
            return []
        new = self.resolve(x, y)
        old = self.active
        if new is old:
            return []

        events: list[ZoneEntered | ZoneExited] = []
        if old is not None:
            self.inside[self._slot[id(old)]] = False
            events.append(ZoneExited(zone=old))
        if new is not None:
            self.inside[self._slot[id(new)]] = True
            events.append(ZoneEntered(zone=new))
        self.active = new
        return events

    def reset(self) -> list[ZoneExited]:
        """Drop to Idle (e.g. on map reload), emitting the pending exit."""
        if self.active is None:
            return []
        old = self.active
        self.inside[self._slot[id(old)]] = False
        self.active = None
        return [ZoneExited(zone=old)]
