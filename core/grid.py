"""core/grid.py — Read-only tile-grid view over a map document.

The only place that indexes into layer data.  Everything else asks
the grid for "what tile is at (col, row) on layer X" and converts
between pixel and tile space through it.

Lookups never raise: an unknown layer, a cell outside the map, or an
empty cell (gid 0) all answer ``None``.
"""

from __future__ import annotations
import math
from typing import Iterator

from core.tilemap import MapDocument, TileLayer


class TileGrid:
    """Bounds-checked tile lookups for one loaded map."""

    __slots__ = ("doc", "_layers")

    def __init__(self, doc: MapDocument):
        self.doc = doc
        self._layers: dict[str, TileLayer] = {}
        for layer in doc.tile_layers:
            # First layer of a given name wins, like Tiled's own lookup
            self._layers.setdefault(layer.name, layer)

    # ── dimensions ──────────────────────────────────────────────────

    @property
    def width(self) -> int:
        return self.doc.width

    @property
    def height(self) -> int:
        return self.doc.height

    @property
    def tile_width(self) -> int:
        return self.doc.tile_width

    @property
    def tile_height(self) -> int:
        return self.doc.tile_height

    @property
    def width_px(self) -> int:
        return self.doc.width_px

    @property
    def height_px(self) -> int:
        return self.doc.height_px

    @property
    def layer_names(self) -> list[str]:
        return [layer.name for layer in self.doc.tile_layers]

    def has_layer(self, name: str | None) -> bool:
        return name is not None and name in self._layers

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.width and 0 <= row < self.height

    # ── lookups ─────────────────────────────────────────────────────

    def tile_at(self, layer_name: str, col: int, row: int) -> int | None:
        """Tile index at (col, row) on *layer_name*, or ``None``."""
        layer = self._layers.get(layer_name)
        if layer is None:
            return None
        if not (0 <= col < layer.width and 0 <= row < layer.height):
            return None
        if not self.in_bounds(col, row):
            return None
        i = row * layer.width + col
        if i >= len(layer.data):
            return None
        gid = layer.data[i]
        return gid if gid > 0 else None

    def tile_at_world(self, layer_name: str, x: float, y: float) -> int | None:
        col, row = self.world_to_tile(x, y)
        return self.tile_at(layer_name, col, row)

    def cells(self, layer_name: str) -> Iterator[tuple[int, int, int]]:
        """Yield ``(col, row, gid)`` for non-empty cells, row-major."""
        layer = self._layers.get(layer_name)
        if layer is None:
            return
        for row in range(min(layer.height, self.height)):
            for col in range(min(layer.width, self.width)):
                gid = self.tile_at(layer_name, col, row)
                if gid is not None:
                    yield col, row, gid

    # ── coordinate conversion ───────────────────────────────────────

    def world_to_tile(self, x: float, y: float) -> tuple[int, int]:
        """Pixel point → (col, row).  Floors, so negatives stay negative."""
        return (int(math.floor(x / self.tile_width)),
                int(math.floor(y / self.tile_height)))

    def tile_to_world_center(self, col: int, row: int) -> tuple[float, float]:
        return (col * self.tile_width + self.tile_width / 2,
                row * self.tile_height + self.tile_height / 2)

    def __repr__(self) -> str:
        return (f"TileGrid({self.width}×{self.height} @ "
                f"{self.tile_width}×{self.tile_height}px, layers={self.layer_names})")
