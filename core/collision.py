"""core/collision.py — Low-level AABB / tile-grid collision primitives.

These live in ``core/`` (not ``logic/``) because both spawn placement
and the movement system need them.

A cell is *solid* when it sits on a collidable layer and its tile
carries ``collides = true`` in the tileset, which is how the map marks
fences, shed walls and the like.
"""

from __future__ import annotations
import math

from core.grid import TileGrid


class SolidMap:
    """Precomputed solid-cell lookup for the collidable layers."""

    __slots__ = ("grid", "layers", "solid_gids")

    def __init__(self, grid: TileGrid, layers: list[str], solid_gids: set[int]):
        self.grid = grid
        self.layers = [name for name in layers if grid.has_layer(name)]
        self.solid_gids = frozenset(solid_gids)

    def is_solid(self, col: int, row: int) -> bool:
        if not self.solid_gids:
            return False
        for name in self.layers:
            gid = self.grid.tile_at(name, col, row)
            if gid is not None and gid in self.solid_gids:
                return True
        return False


def aabb_hits_solid(x: float, y: float, bw: float, bh: float,
                    solids: SolidMap) -> bool:
    """Return True if the box (x, y)→(x+bw, y+bh) overlaps a solid cell.

    Parameters
    ----------
    x, y : float
        Top-left corner of the AABB in pixels.
    bw, bh : float
        Width / height of the AABB (pixels).
    solids : SolidMap
        Solid-cell lookup for the current map.
    """
    grid = solids.grid
    min_c = int(math.floor(x / grid.tile_width))
    max_c = int(math.floor((x + bw - 0.001) / grid.tile_width))
    min_r = int(math.floor(y / grid.tile_height))
    max_r = int(math.floor((y + bh - 0.001) / grid.tile_height))
    for r in range(min_r, max_r + 1):
        for c in range(min_c, max_c + 1):
            if solids.is_solid(c, r):
                return True
    return False


def clamp_to_bounds(x: float, y: float, half_w: float, half_h: float,
                    width_px: float, height_px: float) -> tuple[float, float]:
    """Keep a box centred on (x, y) inside the map rectangle."""
    x = max(half_w, min(x, width_px - half_w))
    y = max(half_h, min(y, height_px - half_h))
    return x, y
