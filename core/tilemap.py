"""core/tilemap.py — Tiled map documents.

Reads maps exported by the Tiled editor as JSON (``.tmj`` / ``.json``)
into plain dataclasses.  Nothing here touches pygame: the scene, the
grid adapter and the trigger extractor all read the same
``MapDocument``.

    doc = load_map("data/maps/roadside.tmj")
    road = doc.tile_layer("road")
    triggers = doc.object_layers

Baked ``.nbt`` maps (see :pymod:`core.nbt`) load through the same
``load_map()`` entry point.
"""

from __future__ import annotations
import base64
import gzip
import json
import struct
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from core.constants import DEFAULT_TILE_SIZE, GID_MASK


class MapFormatError(ValueError):
    """The file is not a map document this loader understands."""


# ── Document model ──────────────────────────────────────────────────

@dataclass
class Tileset:
    firstgid: int
    name: str = ""
    tilecount: int = 0
    columns: int = 0
    tile_width: int = DEFAULT_TILE_SIZE
    tile_height: int = DEFAULT_TILE_SIZE
    image: str = ""
    margin: int = 0
    spacing: int = 0
    # local tile id → custom properties
    tiles: dict[int, dict[str, Any]] = field(default_factory=dict)

    def contains(self, gid: int) -> bool:
        if self.tilecount <= 0:
            return gid >= self.firstgid
        return self.firstgid <= gid < self.firstgid + self.tilecount


@dataclass
class TileLayer:
    name: str
    width: int
    height: int
    data: list[int]                    # row-major gids, flags stripped
    properties: dict[str, Any] = field(default_factory=dict)
    visible: bool = True
    opacity: float = 1.0


@dataclass
class MapObject:
    id: int
    name: str = ""
    type: str = ""
    x: float = 0.0                     # px, top-left for rectangles
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    properties: dict[str, Any] = field(default_factory=dict)
    points: list[tuple[float, float]] | None = None   # polygon / polyline


@dataclass
class ObjectLayer:
    name: str
    objects: list[MapObject] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class MapDocument:
    width: int                         # tiles
    height: int
    tile_width: int = DEFAULT_TILE_SIZE
    tile_height: int = DEFAULT_TILE_SIZE
    tile_layers: list[TileLayer] = field(default_factory=list)
    object_layers: list[ObjectLayer] = field(default_factory=list)
    tilesets: list[Tileset] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)
    source: str = ""

    @property
    def width_px(self) -> int:
        return self.width * self.tile_width

    @property
    def height_px(self) -> int:
        return self.height * self.tile_height

    def tile_layer(self, name: str) -> TileLayer | None:
        for layer in self.tile_layers:
            if layer.name == name:
                return layer
        return None

    def object_layer(self, name: str) -> ObjectLayer | None:
        for layer in self.object_layers:
            if layer.name == name:
                return layer
        return None

    def tileset_for(self, gid: int) -> Tileset | None:
        """Return the tileset owning *gid* (highest firstgid ≤ gid)."""
        best = None
        for ts in self.tilesets:
            if ts.firstgid <= gid and (best is None or ts.firstgid > best.firstgid):
                best = ts
        if best is not None and best.contains(gid):
            return best
        return None

    def tile_properties(self, gid: int) -> dict[str, Any]:
        ts = self.tileset_for(gid)
        if ts is None:
            return {}
        return ts.tiles.get(gid - ts.firstgid, {})

    def gids_with_property(self, name: str, value: Any = True) -> set[int]:
        """Every gid whose tileset tile carries ``name == value``."""
        out: set[int] = set()
        for ts in self.tilesets:
            for local_id, props in ts.tiles.items():
                if props.get(name) == value:
                    out.add(ts.firstgid + local_id)
        return out


# ── Parsing helpers ─────────────────────────────────────────────────

def parse_properties(raw: Any) -> dict[str, Any]:
    """Normalise Tiled custom properties to a plain dict.

    Tiled ≥ 1.2 writes ``[{"name", "type", "value"}, …]``; older
    exports write a flat ``{"name": value}`` dict.
    """
    if not raw:
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    out: dict[str, Any] = {}
    for prop in raw:
        if not isinstance(prop, dict) or "name" not in prop:
            continue
        value = prop.get("value")
        ptype = prop.get("type", "string")
        if ptype == "bool" and isinstance(value, str):
            value = value.strip().lower() == "true"
        elif ptype == "int" and value is not None:
            value = int(value)
        elif ptype == "float" and value is not None:
            value = float(value)
        out[str(prop["name"])] = value
    return out


def _decode_tile_data(raw: dict) -> list[int]:
    data = raw.get("data")
    if data is None:
        if "chunks" in raw:
            raise MapFormatError(
                f"layer {raw.get('name')!r}: infinite maps are not supported")
        return []
    if isinstance(data, list):
        return [int(v) & GID_MASK for v in data]

    # Base64 payload, optionally compressed
    encoding = raw.get("encoding", "csv")
    if encoding != "base64":
        raise MapFormatError(f"layer {raw.get('name')!r}: unsupported encoding {encoding!r}")
    blob = base64.b64decode(data)
    compression = raw.get("compression", "")
    if compression == "zlib":
        blob = zlib.decompress(blob)
    elif compression == "gzip":
        blob = gzip.decompress(blob)
    elif compression:
        raise MapFormatError(f"layer {raw.get('name')!r}: unsupported compression {compression!r}")
    count = len(blob) // 4
    return [v & GID_MASK for v in struct.unpack(f"<{count}I", blob[:count * 4])]


def _parse_object(raw: dict) -> MapObject:
    points = None
    for key in ("polygon", "polyline"):
        if raw.get(key):
            points = [(float(p["x"]), float(p["y"])) for p in raw[key]]
            break
    return MapObject(
        id=int(raw.get("id", 0)),
        name=str(raw.get("name", "")),
        type=str(raw.get("type", raw.get("class", ""))),
        x=float(raw.get("x", 0.0)),
        y=float(raw.get("y", 0.0)),
        width=float(raw.get("width", 0.0)),
        height=float(raw.get("height", 0.0)),
        properties=parse_properties(raw.get("properties")),
        points=points,
    )


def _parse_tileset(raw: dict, base_dir: Path | None) -> Tileset:
    firstgid = int(raw.get("firstgid", 1))
    if "source" in raw:
        # External tileset (.tsj): read it if it sits next to the map
        ext = None
        if base_dir is not None:
            ext_path = base_dir / raw["source"]
            if ext_path.suffix in (".tsj", ".json") and ext_path.exists():
                with open(ext_path, "r", encoding="utf-8") as f:
                    ext = json.load(f)
        if ext is None:
            return Tileset(firstgid=firstgid, name=Path(raw["source"]).stem)
        raw = {**ext, "firstgid": firstgid}

    tiles: dict[int, dict[str, Any]] = {}
    raw_tiles = raw.get("tiles") or []
    if isinstance(raw_tiles, dict):                 # pre-1.2 layout
        for k, v in raw_tiles.items():
            tiles[int(k)] = parse_properties(v.get("properties"))
    else:
        for t in raw_tiles:
            props = parse_properties(t.get("properties"))
            if props:
                tiles[int(t["id"])] = props
    for k, v in (raw.get("tileproperties") or {}).items():
        tiles.setdefault(int(k), {}).update(v)

    return Tileset(
        firstgid=firstgid,
        name=str(raw.get("name", "")),
        tilecount=int(raw.get("tilecount", 0)),
        columns=int(raw.get("columns", 0)),
        tile_width=int(raw.get("tilewidth", DEFAULT_TILE_SIZE)),
        tile_height=int(raw.get("tileheight", DEFAULT_TILE_SIZE)),
        image=str(raw.get("image", "")),
        margin=int(raw.get("margin", 0)),
        spacing=int(raw.get("spacing", 0)),
        tiles=tiles,
    )


def _walk_layers(raw_layers: list) -> Iterator[dict]:
    """Yield leaf layers in document order, flattening groups."""
    for raw in raw_layers:
        if raw.get("type") == "group":
            yield from _walk_layers(raw.get("layers") or [])
        else:
            yield raw


def parse_map(raw: dict, *, source: str = "", base_dir: Path | None = None) -> MapDocument:
    """Build a ``MapDocument`` from an already-decoded Tiled JSON dict."""
    if not isinstance(raw, dict):
        raise MapFormatError("map document must be a JSON object")
    for key in ("width", "height", "layers"):
        if key not in raw:
            raise MapFormatError(f"map document is missing {key!r}")

    doc = MapDocument(
        width=int(raw["width"]),
        height=int(raw["height"]),
        tile_width=int(raw.get("tilewidth", DEFAULT_TILE_SIZE)),
        tile_height=int(raw.get("tileheight", DEFAULT_TILE_SIZE)),
        properties=parse_properties(raw.get("properties")),
        source=source,
    )
    if doc.width < 0 or doc.height < 0 or doc.tile_width <= 0 or doc.tile_height <= 0:
        raise MapFormatError("map dimensions must be positive")

    for ts in raw.get("tilesets") or []:
        doc.tilesets.append(_parse_tileset(ts, base_dir))

    for i, layer in enumerate(_walk_layers(raw["layers"])):
        kind = layer.get("type")
        name = str(layer.get("name") or f"unnamed_{i}")
        props = parse_properties(layer.get("properties"))
        if kind == "tilelayer":
            doc.tile_layers.append(TileLayer(
                name=name,
                width=int(layer.get("width", doc.width)),
                height=int(layer.get("height", doc.height)),
                data=_decode_tile_data(layer),
                properties=props,
                visible=bool(layer.get("visible", True)),
                opacity=float(layer.get("opacity", 1.0)),
            ))
        elif kind == "objectgroup":
            doc.object_layers.append(ObjectLayer(
                name=name,
                objects=[_parse_object(o) for o in layer.get("objects") or []],
                properties=props,
            ))
        # image layers carry nothing the scene uses
    return doc


def load_map(path: str | Path) -> MapDocument:
    """Load a Tiled JSON map or a baked ``.nbt`` map from *path*."""
    path = Path(path)
    if path.suffix == ".nbt":
        from core.nbt import load_map_nbt
        return load_map_nbt(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise MapFormatError(f"{path}: {exc}") from exc
    doc = parse_map(raw, source=str(path), base_dir=path.parent)
    print(f"[MAP] Loaded {path.name}: {doc.width}×{doc.height} tiles, "
          f"{len(doc.tile_layers)} tile layers, {len(doc.object_layers)} object layers")
    return doc
