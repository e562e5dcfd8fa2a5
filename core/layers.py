"""core/layers.py — Declarative tile-layer roles.

Each tile layer in a map gets one ``LayerSpec``: is it collidable, what
depth does it draw at, and what role does it play (ground, walkable
road surface, solid scenery, decoration, overlay).  Specs are merged
from three sources, later ones winning:

  1. ``DEFAULT_LAYER_TABLE`` below (the layer names the bundled map uses)
  2. ``[layers.<name>]`` tables in ``data/tuning.toml``
  3. Custom properties on the layer itself in Tiled
     (``collides`` bool, ``depth`` int, ``role`` string)

Unknown layers are plain ground at depth 0.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

from core.tilemap import MapDocument


class LayerRole(Enum):
    GROUND = "ground"
    WALKABLE = "walkable"
    SOLID = "solid"
    DECOR = "decor"
    OVERLAY = "overlay"


@dataclass(frozen=True)
class LayerSpec:
    name: str
    collidable: bool = False
    depth: int = 0
    role: LayerRole = LayerRole.GROUND


DEFAULT_LAYER_TABLE: dict[str, dict[str, Any]] = {
    "Tile Layer 1": {"collidable": True, "depth": 0, "role": "ground"},
    "shed":         {"collidable": True, "depth": 1, "role": "solid"},
    "road":         {"collidable": True, "depth": 2, "role": "walkable"},
    "Tile Layer 4": {"depth": 5, "role": "decor"},
    "Tile Layer 5": {"depth": 10, "role": "overlay"},
}


def _apply(spec: LayerSpec, overrides: Mapping[str, Any]) -> LayerSpec:
    changes: dict[str, Any] = {}
    if "collidable" in overrides:
        changes["collidable"] = bool(overrides["collidable"])
    elif "collides" in overrides:
        changes["collidable"] = bool(overrides["collides"])
    if "depth" in overrides:
        changes["depth"] = int(overrides["depth"])
    if "role" in overrides:
        try:
            changes["role"] = LayerRole(str(overrides["role"]).lower())
        except ValueError:
            print(f"[LAYERS] {spec.name}: unknown role {overrides['role']!r} — ignored")
    return replace(spec, **changes) if changes else spec


def resolve_layer_specs(
    doc: MapDocument,
    overrides: Mapping[str, Mapping[str, Any]] | None = None,
    table: Mapping[str, Mapping[str, Any]] | None = None,
) -> list[LayerSpec]:
    """Return one spec per tile layer, in document order."""
    if table is None:
        table = DEFAULT_LAYER_TABLE
    overrides = overrides or {}
    specs = []
    for layer in doc.tile_layers:
        spec = LayerSpec(name=layer.name)
        spec = _apply(spec, table.get(layer.name, {}))
        spec = _apply(spec, overrides.get(layer.name, {}))
        spec = _apply(spec, layer.properties)
        specs.append(spec)
    return specs


def by_depth(specs: list[LayerSpec]) -> list[LayerSpec]:
    """Specs sorted for drawing (stable: equal depths keep map order)."""
    return sorted(specs, key=lambda s: s.depth)


def walkable_layer(specs: list[LayerSpec], preferred: str = "") -> str | None:
    """Name of the layer movement is constrained to, or ``None``.

    A configured name wins when the map has it; otherwise the first
    layer whose role is ``WALKABLE``.
    """
    if preferred and any(s.name == preferred for s in specs):
        return preferred
    for spec in specs:
        if spec.role is LayerRole.WALKABLE:
            return spec.name
    return None


def world_layers(specs: list[LayerSpec]) -> list[str]:
    """Collidable layers; the first layer stands in when none is flagged."""
    names = [s.name for s in specs if s.collidable]
    if not names and specs:
        return [specs[0].name]
    return names
