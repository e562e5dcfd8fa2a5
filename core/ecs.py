"""
core/ecs.py — Entity-Component-System

Entities are ints, components are plain dataclasses stored per type.
The explore scene has one player entity; systems still go through
``query`` so a second mover (an NPC, a cart) needs no new plumbing.

    w = World()
    e = w.spawn()
    w.add(e, Position(40.0, 24.0))
    w.add(e, Velocity())

    for eid, pos, vel in w.query(Position, Velocity):
        pos.x += vel.x * dt

Scene-wide singletons (camera, clock, event bus, diagnostics) are
*resources*: one instance per type, set with ``set_res``.
"""

from __future__ import annotations
from typing import Any, Iterator


class World:
    def __init__(self):
        self._next_id = 0
        self._components: dict[type, dict[int, Any]] = {}
        self._resources: dict[type, Any] = {}

    def spawn(self) -> int:
        self._next_id += 1
        return self._next_id

    def add(self, eid: int, comp: Any):
        self._components.setdefault(type(comp), {})[eid] = comp

    def get(self, eid: int, comp_type: type) -> Any | None:
        return self._components.get(comp_type, {}).get(eid)

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield ``(eid, comp1, comp2, ...)`` for entities with every type."""
        if not types:
            return
        stores = [self._components.get(t, {}) for t in types]
        # Walk the rarest component; the rest are membership checks
        for eid in min(stores, key=len):
            if all(eid in s for s in stores):
                yield (eid, *(s[eid] for s in stores))

    def query_one(self, *types: type) -> tuple | None:
        return next(self.query(*types), None)

    def set_res(self, resource: Any):
        self._resources[type(resource)] = resource

    def res(self, res_type: type) -> Any | None:
        return self._resources.get(res_type)

    def __repr__(self) -> str:
        n = len({eid for store in self._components.values() for eid in store})
        return f"World(entities={n}, resources={len(self._resources)})"
