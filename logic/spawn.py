"""logic/spawn.py — Player spawn placement.

``locate()`` scans a tile layer for the designated spawn-marker tile
and falls back to any walkable tile.  ``resolve_spawn()`` is the full
chain the scene uses: tile scan → ``SpawnPoint`` object → map centre.
"""

from __future__ import annotations
from typing import Iterable

from core.constants import SPAWN_OBJECT_LAYER, SPAWN_OBJECT_NAME
from core.grid import TileGrid
from core.tilemap import MapDocument


def locate(grid: TileGrid, layer: str, walkable: Iterable[int],
           marker: int | None) -> tuple[float, float] | None:
    """World-space centre of the spawn cell, or ``None`` when not found.

    The first marker cell wins (lowest row, then lowest column).  With
    no marker on the layer, the first cell whose tile is walkable wins.
    """
    if not grid.has_layer(layer):
        return None
    if marker is not None:
        for col, row, gid in grid.cells(layer):
            if gid == marker:
                return grid.tile_to_world_center(col, row)
    walkable = frozenset(walkable)
    if walkable:
        for col, row, gid in grid.cells(layer):
            if gid in walkable:
                return grid.tile_to_world_center(col, row)
    return None


def spawn_object(doc: MapDocument, layer: str = SPAWN_OBJECT_LAYER,
                 name: str = SPAWN_OBJECT_NAME) -> tuple[float, float] | None:
    """Position of the named spawn object, if the map places one."""
    group = doc.object_layer(layer)
    if group is None:
        return None
    for obj in group.objects:
        if obj.name == name:
            return obj.x, obj.y
    return None


def map_center(grid: TileGrid) -> tuple[float, float]:
    return float(grid.width_px // 2), float(grid.height_px // 2)


def resolve_spawn(doc: MapDocument, grid: TileGrid, layer: str | None,
                  walkable: Iterable[int], marker: int | None,
                  diag=None) -> tuple[tuple[float, float], str]:
    """Return ``(point, source)`` where *source* names the rule that hit.

    *source* is one of ``"marker"``, ``"walkable"``, ``"object"``,
    ``"center"``.
    """
    walkable = frozenset(walkable)
    if layer:
        point = locate(grid, layer, walkable, marker)
        if point is not None:
            col, row = grid.world_to_tile(*point)
            source = "marker" if grid.tile_at(layer, col, row) == marker else "walkable"
            return point, source

    point = spawn_object(doc)
    if point is not None:
        if diag is not None:
            diag.record("spawn", f"no spawn tile on {layer!r} — using {SPAWN_OBJECT_NAME}")
        return point, "object"

    if diag is not None:
        diag.record("spawn", "no spawn tile or object — using map centre")
    return map_center(grid), "center"
