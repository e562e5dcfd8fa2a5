"""logic/gate.py — Walkable-tile movement gate.

Every frame the requested velocity is checked against the tile the
player would land on.  If that tile is on the walkable layer and in the
walkable set, the move goes through unchanged; otherwise the whole move
is dropped for this frame.  There is no per-axis sliding: a diagonal
into the verge stops dead rather than skidding along the road edge.

With no walkable layer (or an empty walkable set) the gate lets
everything through and the map is walk-anywhere.
"""

from __future__ import annotations
import math
from typing import Iterable

from core.grid import TileGrid


class MovementGate:
    """Accept-or-reject filter over requested velocities."""

    def __init__(self, grid: TileGrid, layer: str | None,
                 walkable: Iterable[int]):
        self.grid = grid
        self.walkable: frozenset[int] = frozenset(walkable)
        self.layer = layer if grid.has_layer(layer) else None
        self.accepted = 0
        self.rejected = 0

    @property
    def active(self) -> bool:
        """False when the gate degrades to always-accept."""
        return self.layer is not None and bool(self.walkable)

    def allows(self, x: float, y: float) -> bool:
        """True if the point lies on a walkable tile (or the gate is off).

        Non-finite points never pass, even with the gate off.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            return False
        if not self.active:
            return True
        gid = self.grid.tile_at_world(self.layer, x, y)
        return gid is not None and gid in self.walkable

    def attempt(self, pos: tuple[float, float], velocity: tuple[float, float],
                dt: float) -> tuple[float, float]:
        """Return the velocity to apply this frame: all of it, or zero."""
        vx, vy = velocity
        nx = pos[0] + vx * dt
        ny = pos[1] + vy * dt
        if self.allows(nx, ny):
            self.accepted += 1
            return vx, vy
        self.rejected += 1
        return 0.0, 0.0
