"""logic/movement.py — Physics / movement system.

Moves the player: the walkable-tile gate decides whether the requested
velocity is allowed at all, then solid tiles (wall-sliding) and the
map edge resolve the accepted move.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import Position, Velocity, Player, Collider
from core.collision import SolidMap, aabb_hits_solid, clamp_to_bounds
from logic.gate import MovementGate

if TYPE_CHECKING:
    from core.ecs import World


def movement_system(world: "World", dt: float, gate: MovementGate,
                    solids: SolidMap) -> int:
    """Gate, collide and commit player movement.  Returns rejected moves."""
    grid = solids.grid
    rejected = 0

    for eid, _, pos, vel in world.query(Player, Position, Velocity):
        if vel.x == 0.0 and vel.y == 0.0:
            continue

        vel.x, vel.y = gate.attempt((pos.x, pos.y), (vel.x, vel.y), dt)
        if vel.x == 0.0 and vel.y == 0.0:
            rejected += 1
            continue

        col = world.get(eid, Collider)
        bw = col.width if col else 0.0
        bh = col.height if col else 0.0
        nx = pos.x + vel.x * dt
        ny = pos.y + vel.y * dt

        # Axis-separated tile collision, so the player slides along walls
        if col is not None and col.solid:
            if aabb_hits_solid(nx - bw / 2, pos.y - bh / 2, bw, bh, solids):
                nx = pos.x
                vel.x = 0.0
            if aabb_hits_solid(nx - bw / 2, ny - bh / 2, bw, bh, solids):
                ny = pos.y
                vel.y = 0.0

        # Keep inside the map
        nx, ny = clamp_to_bounds(nx, ny, bw / 2, bh / 2,
                                 grid.width_px, grid.height_px)

        # A slide or clamp can land somewhere the gate never saw
        if (nx, ny) != (pos.x, pos.y) and not gate.allows(nx, ny):
            vel.x = vel.y = 0.0
            rejected += 1
            continue

        # Commit movement
        pos.x = nx
        pos.y = ny

    return rejected
