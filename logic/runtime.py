"""logic/runtime.py — One-time map setup for the explore scene.

Turns a loaded ``MapDocument`` plus the tuning table into everything
the per-frame systems need: the tile grid, layer roles, the walkable
set and gate, solid cells, the spawn point, trigger zones and the
proximity tracker.  Nothing here can fail on map *content* — a map
with no road layer or no trigger layer just gets a no-op gate or an
empty zone list.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from core import tuning
from core.collision import SolidMap
from core.constants import (
    WALKABLE_LAYER, SPAWN_LAYER, TRIGGER_PROPERTY,
    PROXIMITY_THRESHOLD, PROXIMITY_FLOOR, PROXIMITY_SCALE,
)
from core.diag import DiagLog
from core.grid import TileGrid
from core.layers import LayerSpec, resolve_layer_specs, walkable_layer, world_layers
from core.tilemap import MapDocument
from logic.gate import MovementGate
from logic.proximity import ProximityTracker
from logic.spawn import resolve_spawn
from logic.zones import TriggerZone, adaptive_threshold, extract


@dataclass
class MapRuntime:
    doc: MapDocument
    grid: TileGrid
    specs: list[LayerSpec]
    walkable_layer: str | None
    walkable: frozenset[int]
    marker: int | None
    gate: MovementGate
    solids: SolidMap
    spawn: tuple[float, float]
    spawn_source: str
    zones: list[TriggerZone]
    threshold: float
    tracker: ProximityTracker


def walkable_set(doc: MapDocument, configured: Iterable[int] | None) -> frozenset[int]:
    """Configured tile ids, or every tileset tile marked ``walkable``."""
    if configured:
        return frozenset(int(v) for v in configured)
    return frozenset(doc.gids_with_property("walkable", True))


def choose_marker(walkable: frozenset[int],
                  configured: int | None) -> tuple[int | None, frozenset[int]]:
    """Pick the spawn marker.

    A configured marker joins a non-empty walkable set.  With nothing
    walkable it only places the spawn, so the gate stays off instead
    of pinning the player to marker tiles.
    """
    if configured is not None:
        marker = int(configured)
        if walkable:
            return marker, walkable | {marker}
        return marker, walkable
    if walkable:
        return min(walkable), walkable
    return None, walkable


def build_runtime(doc: MapDocument, diag: DiagLog | None = None) -> MapRuntime:
    grid = TileGrid(doc)
    specs = resolve_layer_specs(doc, tuning.section("layers"))

    # ── Walkable layer + gate ────────────────────────────────────────
    layer = walkable_layer(specs, tuning.get("movement", "walkable_layer", WALKABLE_LAYER))
    walkable = walkable_set(doc, tuning.get("movement", "walkable_tiles"))
    marker, walkable = choose_marker(walkable, tuning.get("movement", "spawn_marker"))
    gate = MovementGate(grid, layer, walkable)
    if diag is not None:
        if layer is None:
            diag.record("gate", "no walkable layer — movement unconstrained")
        elif not walkable:
            diag.record("gate", f"layer {layer!r} has no walkable tiles — movement unconstrained")
        else:
            diag.record("gate", f"movement constrained to {len(walkable)} tile ids on {layer!r}")

    # ── Solid cells ──────────────────────────────────────────────────
    collidable = world_layers(specs)
    if diag is not None and specs and not any(s.collidable for s in specs):
        diag.record("map", f"no collidable layer — using {collidable[0]!r}")
    solids = SolidMap(grid, collidable, doc.gids_with_property("collides", True))

    # ── Spawn ────────────────────────────────────────────────────────
    spawn_layer = tuning.get("movement", "spawn_layer", SPAWN_LAYER) or layer
    spawn, source = resolve_spawn(doc, grid, spawn_layer, walkable, marker, diag=diag)

    # ── Trigger zones ────────────────────────────────────────────────
    prop = tuning.get("proximity", "trigger_property", TRIGGER_PROPERTY)
    zones = extract(doc, prop, diag=diag)
    threshold = adaptive_threshold(
        zones,
        default=float(tuning.get("proximity", "threshold", PROXIMITY_THRESHOLD)),
        floor=float(tuning.get("proximity", "floor", PROXIMITY_FLOOR)),
        scale=float(tuning.get("proximity", "scale", PROXIMITY_SCALE)),
    )
    tracker = ProximityTracker(zones, threshold)

    if diag is not None:
        diag.record("spawn", f"player spawns at ({spawn[0]:.0f}, {spawn[1]:.0f}) via {source}")
        if zones:
            diag.record("zones", f"proximity radius {threshold:.1f}px")

    return MapRuntime(
        doc=doc, grid=grid, specs=specs,
        walkable_layer=layer, walkable=walkable, marker=marker,
        gate=gate, solids=solids,
        spawn=spawn, spawn_source=source,
        zones=zones, threshold=threshold, tracker=tracker,
    )
