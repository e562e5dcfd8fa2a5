"""core/nbt.py — Baked map files.

A baked map is the parsed ``MapDocument`` written back out with
`nbtlib`, so the scene can start without re-parsing Tiled JSON (and
without the external tileset files it may reference).

Structure (TAG_Compound):
  - width, height, tile_width, tile_height: TAG_Int
  - source: TAG_String
  - properties: TAG_List of property compounds
  - tile_layers: TAG_List of { name, width, height, visible, opacity,
                               data: TAG_Int_Array (row-major gids),
                               properties }
  - object_layers: TAG_List of { name, properties,
                                 objects: TAG_List of { id, name, type,
                                 x, y, width, height, properties,
                                 points? } }
  - tilesets: TAG_List of { firstgid, name, tilecount, columns,
                            tile_width, tile_height, image, margin,
                            spacing, tiles: TAG_List of { id, properties } }

Property compounds mirror Tiled's ``{name, type, value}`` triplets with
the value stored as a string; ``parse_properties`` restores the type.
Lists and dicts are stored as JSON under type ``json``; a ``None`` value
is type ``null`` with no ``value`` key.
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Any

import nbtlib
from nbtlib import tag

from core.tilemap import (
    MapDocument, MapObject, ObjectLayer, TileLayer, Tileset, parse_properties,
)


# ── Encoding ────────────────────────────────────────────────────────

def _prop_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, (list, tuple, dict)):
        return "json"
    return "string"


def _encode_props(props: dict[str, Any]) -> nbtlib.List:
    out = nbtlib.List[nbtlib.Compound]()
    for name, value in props.items():
        ptype = _prop_type(value)
        comp = nbtlib.Compound()
        comp["name"] = tag.String(name)
        comp["type"] = tag.String(ptype)
        # A null property is written without a value
        if ptype == "json":
            comp["value"] = tag.String(json.dumps(value))
        elif ptype == "bool":
            comp["value"] = tag.String("true" if value else "false")
        elif ptype != "null":
            comp["value"] = tag.String(str(value))
        out.append(comp)
    return out


def _encode_object(obj: MapObject) -> nbtlib.Compound:
    comp = nbtlib.Compound()
    comp["id"] = tag.Int(obj.id)
    comp["name"] = tag.String(obj.name)
    comp["type"] = tag.String(obj.type)
    comp["x"] = tag.Double(obj.x)
    comp["y"] = tag.Double(obj.y)
    comp["width"] = tag.Double(obj.width)
    comp["height"] = tag.Double(obj.height)
    comp["properties"] = _encode_props(obj.properties)
    if obj.points is not None:
        pts = nbtlib.List[nbtlib.Compound]()
        for px, py in obj.points:
            p = nbtlib.Compound()
            p["x"] = tag.Double(px)
            p["y"] = tag.Double(py)
            pts.append(p)
        comp["points"] = pts
    return comp


def save_map_nbt(doc: MapDocument, path: str | Path) -> Path:
    """Write *doc* to *path* as a baked NBT map.  Returns the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    root = nbtlib.Compound()
    root["width"] = tag.Int(doc.width)
    root["height"] = tag.Int(doc.height)
    root["tile_width"] = tag.Int(doc.tile_width)
    root["tile_height"] = tag.Int(doc.tile_height)
    root["source"] = tag.String(doc.source)
    root["properties"] = _encode_props(doc.properties)

    layers = nbtlib.List[nbtlib.Compound]()
    for layer in doc.tile_layers:
        comp = nbtlib.Compound()
        comp["name"] = tag.String(layer.name)
        comp["width"] = tag.Int(layer.width)
        comp["height"] = tag.Int(layer.height)
        comp["visible"] = tag.Byte(1 if layer.visible else 0)
        comp["opacity"] = tag.Double(layer.opacity)
        comp["data"] = tag.IntArray(layer.data)
        comp["properties"] = _encode_props(layer.properties)
        layers.append(comp)
    root["tile_layers"] = layers

    groups = nbtlib.List[nbtlib.Compound]()
    for layer in doc.object_layers:
        comp = nbtlib.Compound()
        comp["name"] = tag.String(layer.name)
        comp["properties"] = _encode_props(layer.properties)
        objs = nbtlib.List[nbtlib.Compound]()
        for obj in layer.objects:
            objs.append(_encode_object(obj))
        comp["objects"] = objs
        groups.append(comp)
    root["object_layers"] = groups

    sets = nbtlib.List[nbtlib.Compound]()
    for ts in doc.tilesets:
        comp = nbtlib.Compound()
        comp["firstgid"] = tag.Int(ts.firstgid)
        comp["name"] = tag.String(ts.name)
        comp["tilecount"] = tag.Int(ts.tilecount)
        comp["columns"] = tag.Int(ts.columns)
        comp["tile_width"] = tag.Int(ts.tile_width)
        comp["tile_height"] = tag.Int(ts.tile_height)
        comp["image"] = tag.String(ts.image)
        comp["margin"] = tag.Int(ts.margin)
        comp["spacing"] = tag.Int(ts.spacing)
        tiles = nbtlib.List[nbtlib.Compound]()
        for local_id, props in sorted(ts.tiles.items()):
            t = nbtlib.Compound()
            t["id"] = tag.Int(local_id)
            t["properties"] = _encode_props(props)
            tiles.append(t)
        comp["tiles"] = tiles
        sets.append(comp)
    root["tilesets"] = sets

    # Remove old file if exists to ensure clean overwrite
    if path.exists():
        path.unlink()
    nbtlib.File(root).save(path)
    print(f"[MAP] Baked {path}")
    return path


# ── Decoding ────────────────────────────────────────────────────────

def _decode_props(raw) -> dict[str, Any]:
    if not raw:
        return {}
    out: dict[str, Any] = {}
    for p in raw:
        name, ptype = str(p["name"]), str(p["type"])
        if "value" not in p:
            out[name] = None
        elif ptype == "json":
            out[name] = json.loads(str(p["value"]))
        else:
            out.update(parse_properties(
                [{"name": name, "type": ptype, "value": str(p["value"])}]))
    return out


def load_map_nbt(path: str | Path) -> MapDocument:
    """Load a baked NBT map written by :func:`save_map_nbt`."""
    path = Path(path)
    # In nbtlib 2.0+, the File object IS the root compound
    root = nbtlib.load(path)

    doc = MapDocument(
        width=int(root["width"]),
        height=int(root["height"]),
        tile_width=int(root["tile_width"]),
        tile_height=int(root["tile_height"]),
        properties=_decode_props(root.get("properties")),
        source=str(root.get("source") or path),
    )

    for comp in root.get("tile_layers") or []:
        doc.tile_layers.append(TileLayer(
            name=str(comp["name"]),
            width=int(comp["width"]),
            height=int(comp["height"]),
            data=[int(v) for v in comp["data"]],
            properties=_decode_props(comp.get("properties")),
            visible=bool(int(comp.get("visible", 1))),
            opacity=float(comp.get("opacity", 1.0)),
        ))

    for comp in root.get("object_layers") or []:
        objects = []
        for o in comp.get("objects") or []:
            points = None
            if "points" in o:
                points = [(float(p["x"]), float(p["y"])) for p in o["points"]]
            objects.append(MapObject(
                id=int(o["id"]),
                name=str(o["name"]),
                type=str(o["type"]),
                x=float(o["x"]),
                y=float(o["y"]),
                width=float(o["width"]),
                height=float(o["height"]),
                properties=_decode_props(o.get("properties")),
                points=points,
            ))
        doc.object_layers.append(ObjectLayer(
            name=str(comp["name"]),
            objects=objects,
            properties=_decode_props(comp.get("properties")),
        ))

    for comp in root.get("tilesets") or []:
        tiles = {}
        for t in comp.get("tiles") or []:
            tiles[int(t["id"])] = _decode_props(t.get("properties"))
        doc.tilesets.append(Tileset(
            firstgid=int(comp["firstgid"]),
            name=str(comp["name"]),
            tilecount=int(comp["tilecount"]),
            columns=int(comp["columns"]),
            tile_width=int(comp["tile_width"]),
            tile_height=int(comp["tile_height"]),
            image=str(comp["image"]),
            margin=int(comp["margin"]),
            spacing=int(comp["spacing"]),
            tiles=tiles,
        ))

    print(f"[MAP] Loaded baked map {path.name}: {doc.width}×{doc.height} tiles")
    return doc
