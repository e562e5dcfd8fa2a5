"""logic/tick.py — System tick orchestration.

Houses the per-frame system pipeline plus the tiny input system that
doesn't warrant its own file.  Order matters: movement is resolved
first so proximity is judged against the player's *new* position.

Usage::

    from logic.tick import tick_systems, input_system
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import GameClock, Player, Velocity, Facing, Position
from core.diag import DiagLog
from core.events import EventBus
from logic.movement import movement_system

if TYPE_CHECKING:
    from core.ecs import World
    from logic.runtime import MapRuntime


def input_system(world: "World", move: tuple[float, float] | None = None) -> None:
    """Set Player velocity from movement input.

    Pass ``move=(dx, dy)`` normalised from the InputManager.
    Also updates the player's Facing direction.
    """
    if move is None:
        return
    dx, dy = move
    for eid, player, vel in world.query(Player, Velocity):
        vel.x = dx * player.speed
        vel.y = dy * player.speed
        if abs(vel.x) > 0.01 or abs(vel.y) > 0.01:
            facing = world.get(eid, Facing)
            if facing is not None:
                if abs(vel.x) >= abs(vel.y):
                    facing.direction = "right" if vel.x > 0 else "left"
                else:
                    facing.direction = "down" if vel.y > 0 else "up"


def proximity_system(world: "World", rt: "MapRuntime") -> int:
    """Feed the player's position to the tracker; emit its edge events."""
    result = world.query_one(Player, Position)
    if not result:
        return 0
    _, _, pos = result
    events = rt.tracker.update(pos.x, pos.y)
    bus = world.res(EventBus)
    if bus:
        for event in events:
            bus.emit(event)
    return len(events)


def tick_systems(world: "World", dt: float, rt: "MapRuntime") -> None:
    """Run all core systems for one frame.

    Parameters
    ----------
    world : World
        The ECS world.
    dt : float
        Delta-time in seconds.
    rt : MapRuntime
        Grid, gate, solids and tracker for the loaded map.
    """
    # Advance scene clock
    clock = world.res(GameClock)
    if clock:
        clock.time += dt
        clock.frames += 1

    # Physics (gate → solids → bounds)
    rejected = movement_system(world, dt, rt.gate, rt.solids)
    if rejected:
        diag = world.res(DiagLog)
        if diag:
            diag.record("gate", "move rejected: target tile is not walkable")

    # Triggers
    proximity_system(world, rt)

    # Event bus drain (drives the prompt)
    bus = world.res(EventBus)
    if bus:
        bus.drain()
