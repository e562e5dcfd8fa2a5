"""logic/zones.py — Trigger zones read from map object layers.

A map marks its trigger layer with a boolean custom property
(``triggering = true`` by default).  Every object on the first such
layer becomes a ``TriggerZone``, in the order the layer lists them.
That order matters: the proximity tracker gives ties to the earlier
zone.

    zones = extract(doc)
    radius = adaptive_threshold(zones)

A map with no trigger layer simply has no zones.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import (
    TRIGGER_PROPERTY, PROXIMITY_THRESHOLD, PROXIMITY_FLOOR, PROXIMITY_SCALE,
)
from core.tilemap import MapDocument, MapObject, ObjectLayer


@dataclass(frozen=True)
class Bounds:
    left: float
    right: float
    top: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class TriggerZone:
    id: int                          # ordinal in extraction order
    center: tuple[float, float]
    bounds: Bounds
    size: tuple[float, float]
    name: str = ""
    description: str = ""

    @classmethod
    def from_rect(cls, zid: int, x: float, y: float, w: float, h: float,
                  name: str = "", description: str = "") -> "TriggerZone":
        return cls(
            id=zid,
            center=(x + w / 2, y + h / 2),
            bounds=Bounds(left=x, right=x + w, top=y, bottom=y + h),
            size=(w, h),
            name=name,
            description=description,
        )

    @property
    def half_extent(self) -> float:
        """Half-width plus half-height — the zone's "typical size"."""
        return self.size[0] / 2 + self.size[1] / 2

    @property
    def label(self) -> str:
        return self.name or f"Zone {self.id}"


def is_trigger_layer(layer: ObjectLayer, prop: str = TRIGGER_PROPERTY) -> bool:
    value = layer.properties.get(prop)
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def trigger_layer(doc: MapDocument, prop: str = TRIGGER_PROPERTY) -> ObjectLayer | None:
    """First object layer flagged with *prop*, in document order."""
    for layer in doc.object_layers:
        if is_trigger_layer(layer, prop):
            return layer
    return None


def _object_rect(obj: MapObject) -> tuple[float, float, float, float]:
    """(x, y, w, h) of an object; polygons use their bounding box."""
    if obj.points:
        xs = [obj.x + px for px, _ in obj.points]
        ys = [obj.y + py for _, py in obj.points]
        return min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)
    return obj.x, obj.y, obj.width, obj.height


def extract(doc: MapDocument, prop: str = TRIGGER_PROPERTY,
            diag=None) -> list[TriggerZone]:
    """Build the ordered zone list from the trigger layer (may be empty)."""
    layer = trigger_layer(doc, prop)
    if layer is None:
        if diag is not None:
            diag.record("zones", f"no object layer flagged {prop}=true — triggers disabled")
        return []

    zones: list[TriggerZone] = []
    for obj in layer.objects:
        x, y, w, h = _object_rect(obj)
        if w <= 0 or h <= 0:
            # Point objects have no area to stand in
            if diag is not None:
                diag.record("zones", f"skipped zero-area object {obj.name or obj.id!r}")
            continue
        zones.append(TriggerZone.from_rect(
            len(zones), x, y, w, h, name=obj.name,
            description=str(obj.properties.get("description", "")),
        ))

    if diag is not None:
        diag.record("zones", f"{len(zones)} trigger zones from layer {layer.name!r}")
    return zones


def adaptive_threshold(zones: list[TriggerZone],
                       default: float = PROXIMITY_THRESHOLD,
                       floor: float = PROXIMITY_FLOOR,
                       scale: float = PROXIMITY_SCALE) -> float:
    """Proximity radius sized to the zones.

    When the fixed *default* is larger than the average zone half-extent
    it would make every zone "near" from far away, so the radius shrinks
    to ``max(scale × average, floor)``.
    """
    if not zones:
        return default
    typical = sum(z.half_extent for z in zones) / len(zones)
    if default > typical:
        return max(scale * typical, floor)
    return default
