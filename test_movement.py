"""test_movement.py — Headless tests for spawn, the movement gate and
the per-frame movement pipeline.

Every map here is built in memory; nothing touches pygame.

Run:  python test_movement.py      (or pytest)
"""
from __future__ import annotations
import sys, traceback

from core import tuning
from core.collision import SolidMap
from core.diag import DiagLog
from core.ecs import World
from core.events import EventBus
from core.grid import TileGrid
from core.tilemap import parse_map
from components import Position, Velocity, Collider, Facing, Player, GameClock
from logic.gate import MovementGate
from logic.movement import movement_system
from logic.runtime import build_runtime, choose_marker, walkable_set
from logic.spawn import locate, map_center, resolve_spawn
from logic.tick import input_system, tick_systems
from logic.trigger_ui import TriggerUIController


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

def check(cond: bool, label: str, detail: str = ""):
    if cond:
        ok(label)
    else:
        fail(label, detail)
    assert cond, f"{label} {detail}".strip()

DT = 1.0 / 60.0


# ── Map builders ─────────────────────────────────────────────────────

def _layer(name: str, w: int, h: int, cells: dict | None = None,
           fill: int = 0) -> dict:
    data = [fill] * (w * h)
    for (c, r), gid in (cells or {}).items():
        data[r * w + c] = gid
    return {"type": "tilelayer", "name": name, "width": w, "height": h, "data": data}


def _objects(name: str, objs: list[dict], triggering: bool = False) -> dict:
    layer = {"type": "objectgroup", "name": name, "objects": objs}
    if triggering:
        layer["properties"] = [{"name": "triggering", "type": "bool", "value": True}]
    return layer


def _doc(w: int, h: int, layers: list, tile: int = 16, tiles: list | None = None):
    return parse_map({
        "width": w, "height": h, "tilewidth": tile, "tileheight": tile,
        "layers": layers,
        "tilesets": [{"firstgid": 1, "name": "t", "tilecount": 16, "columns": 4,
                      "tiles": tiles or []}],
    })


_WALKABLE_TILES = [
    {"id": 2, "properties": [{"name": "walkable", "type": "bool", "value": True}]},
    {"id": 3, "properties": [{"name": "walkable", "type": "bool", "value": True}]},
    {"id": 4, "properties": [{"name": "collides", "type": "bool", "value": True}]},
]


def _spawn_player(w: World, x: float, y: float, speed: float = 150.0) -> int:
    eid = w.spawn()
    w.add(eid, Position(x=x, y=y))
    w.add(eid, Velocity())
    w.add(eid, Collider())
    w.add(eid, Facing())
    w.add(eid, Player(speed=speed))
    return eid


class _Sink:
    def __init__(self):
        self.calls: list[tuple] = []

    def show(self, anchor):
        self.calls.append(("show", anchor))

    def hide(self):
        self.calls.append(("hide",))


# ═══════════════════════════════════════════════════════════════════════
#  SECTION 1:  MOVEMENT GATE
# ═══════════════════════════════════════════════════════════════════════

def test_gate_rejects_off_road():
    print("\n=== 1: MovementGate ===")
    # Tile 5 at (0,0) is walkable, tile 1 at (1,0) is not
    grid = TileGrid(_doc(2, 1, [_layer("road", 2, 1, {(0, 0): 5, (1, 0): 1})]))
    gate = MovementGate(grid, "road", {5})

    out = gate.attempt((8.0, 8.0), (150.0, 0.0), 0.1)
    check(out == (0.0, 0.0), "Rightward move into tile 1 rejected on both axes", str(out))
    check(gate.rejected == 1, "Rejection counted")

    out = gate.attempt((8.0, 8.0), (150.0, 30.0), 0.01)
    check(out == (150.0, 30.0), "Move staying on tile 5 keeps full velocity", str(out))

    out = gate.attempt((8.0, 8.0), (-150.0, 0.0), 0.1)
    check(out == (0.0, 0.0), "Move off the map edge rejected")

    check(gate.allows(4.0, 4.0) and not gate.allows(20.0, 4.0), "allows() per point")


def test_gate_degrades_to_noop():
    print("\n=== 2: MovementGate no-op cases ===")
    grid = TileGrid(_doc(2, 1, [_layer("ground", 2, 1, fill=1)]))

    no_layer = MovementGate(grid, "road", {5})
    check(no_layer.layer is None and not no_layer.active, "Missing layer → inactive gate")
    check(no_layer.attempt((8.0, 8.0), (500.0, -500.0), 1.0) == (500.0, -500.0),
          "Inactive gate accepts any move")

    empty = MovementGate(grid, "ground", set())
    check(not empty.active, "Empty walkable set → inactive gate")
    check(empty.attempt((8.0, 8.0), (0.0, 40.0), 1.0) == (0.0, 40.0),
          "Empty-set gate accepts")

    inf = float("inf")
    check(empty.attempt((8.0, 8.0), (inf, 0.0), DT) == (0.0, 0.0),
          "Infinite velocity rejected by an inactive gate")
    check(no_layer.attempt((8.0, 8.0), (0.0, float("nan")), DT) == (0.0, 0.0),
          "NaN velocity rejected by an inactive gate")

    grid2 = TileGrid(_doc(2, 1, [_layer("road", 2, 1, fill=5)]))
    live = MovementGate(grid2, "road", {5})
    check(live.attempt((8.0, 8.0), (-inf, 0.0), DT) == (0.0, 0.0),
          "Infinite velocity rejected by an active gate")
    check(live.attempt((float("nan"), 8.0), (10.0, 0.0), DT) == (0.0, 0.0),
          "NaN position rejected")
    check(not live.allows(inf, 4.0) and live.rejected == 2, "allows() refuses non-finite points")


# ═══════════════════════════════════════════════════════════════════════
#  SECTION 3:  SPAWN PLACEMENT
# ═══════════════════════════════════════════════════════════════════════

def test_spawn_locator():
    print("\n=== 3: SpawnLocator ===")
    doc = _doc(8, 8, [_layer("road", 8, 8, {(3, 4): 9, (6, 1): 3})])
    grid = TileGrid(doc)

    check(locate(grid, "road", {3}, 9) == (56.0, 72.0), "Marker at (3,4) → (56, 72)")

    grid2 = TileGrid(_doc(8, 8, [_layer("road", 8, 8, {(6, 1): 3, (2, 5): 3})]))
    check(locate(grid2, "road", {3}, 9) == (104.0, 24.0),
          "No marker → first walkable cell (row-major)")
    check(locate(grid2, "road", {7}, 9) is None, "Nothing matches → None")
    check(locate(grid2, "absent", {3}, 3) is None, "Unknown layer → None")

    twice = TileGrid(_doc(4, 4, [_layer("road", 4, 4, {(3, 0): 9, (0, 1): 9})]))
    check(locate(twice, "road", set(), 9) == (56.0, 8.0), "Lowest row wins, then column")


def test_spawn_fallback_chain():
    print("\n=== 4: Spawn fallback chain ===")
    marker_doc = _doc(8, 8, [_layer("road", 8, 8, {(3, 4): 9})])
    point, source = resolve_spawn(marker_doc, TileGrid(marker_doc), "road", {3}, 9)
    check((point, source) == ((56.0, 72.0), "marker"), "Marker tile wins", str(source))

    obj_doc = _doc(5, 3, [_layer("ground", 5, 3, fill=1),
                          _objects("Objects", [{"id": 1, "name": "SpawnPoint",
                                                "x": 30, "y": 12}])])
    diag = DiagLog(echo=False)
    point, source = resolve_spawn(obj_doc, TileGrid(obj_doc), "road", {3}, 9, diag=diag)
    check((point, source) == ((30.0, 12.0), "object"), "SpawnPoint object used")
    check(diag.for_cat("spawn"), "Fallback recorded on diag log")

    bare = _doc(3, 3, [_layer("ground", 3, 3, fill=1)], tile=15)
    point, source = resolve_spawn(bare, TileGrid(bare), None, set(), None)
    check((point, source) == ((22.0, 22.0), "center"), "Map centre, floored", str(point))
    check(map_center(TileGrid(bare)) == (22.0, 22.0), "map_center()")


def test_walkable_discovery():
    print("\n=== 5: Walkable set + marker ===")
    doc = _doc(2, 2, [_layer("road", 2, 2)], tiles=_WALKABLE_TILES)
    check(walkable_set(doc, None) == {3, 4}, "Discovered from tileset walkable=true")
    check(walkable_set(doc, [7, 8]) == {7, 8}, "Configured ids win")
    check(choose_marker(frozenset({3, 4}), None) == (3, frozenset({3, 4})),
          "Default marker is the lowest walkable id")
    marker, walk = choose_marker(frozenset({3}), 9)
    check(marker == 9 and walk == {3, 9}, "Configured marker joins the walkable set")
    check(choose_marker(frozenset(), None) == (None, frozenset()), "Nothing walkable → no marker")
    marker, walk = choose_marker(frozenset(), 4)
    check(marker == 4 and walk == frozenset(),
          "Configured marker alone does not switch the gate on", str(walk))


# ═══════════════════════════════════════════════════════════════════════
#  SECTION 6:  MOVEMENT SYSTEM
# ═══════════════════════════════════════════════════════════════════════

def test_movement_system():
    print("\n=== 6: Movement system ===")
    doc = _doc(6, 3, [_layer("road", 6, 3, fill=3),
                      _layer("shed", 6, 3, {(3, 1): 5})],
               tiles=_WALKABLE_TILES)
    grid = TileGrid(doc)
    gate = MovementGate(grid, "road", {3})
    solids = SolidMap(grid, ["shed"], doc.gids_with_property("collides"))

    w = World()
    p = _spawn_player(w, 40.0, 24.0)
    pos, vel = w.get(p, Position), w.get(p, Velocity)

    vel.x, vel.y = 100.0, 0.0
    rejected = movement_system(w, 0.1, gate, solids)
    check(rejected == 0 and pos.x == 40.0 and vel.x == 0.0,
          "Shed wall stops horizontal move", f"pos=({pos.x}, {pos.y})")

    vel.x, vel.y = 100.0, 100.0
    movement_system(w, 0.1, gate, solids)
    check((pos.x, pos.y) == (40.0, 34.0), "Diagonal slides along the wall",
          f"pos=({pos.x}, {pos.y})")

    vel.x, vel.y = 0.0, 0.0
    check(movement_system(w, 0.1, gate, solids) == 0 and (pos.x, pos.y) == (40.0, 34.0),
          "Zero velocity leaves the player alone")

    # Gate rejection keeps the position
    road = _doc(4, 1, [_layer("road", 4, 1, {(0, 0): 3, (1, 0): 3})], tiles=_WALKABLE_TILES)
    rgrid = TileGrid(road)
    w2 = World()
    p2 = _spawn_player(w2, 24.0, 8.0)
    w2.get(p2, Velocity).x = 150.0
    n = movement_system(w2, 0.1, MovementGate(rgrid, "road", {3}), SolidMap(rgrid, [], set()))
    check(n == 1 and w2.get(p2, Position).x == 24.0, "Gate rejection → no movement")

    # No gate: the map edge clamps instead
    w3 = World()
    p3 = _spawn_player(w3, 8.0, 8.0)
    w3.get(p3, Velocity).x = -100.0
    movement_system(w3, 0.1, MovementGate(rgrid, None, {3}), SolidMap(rgrid, [], set()))
    check(w3.get(p3, Position).x == 6.0, "Clamped to the map edge by half the collider")

    # Target tile is road but the wall slide lands off it
    slide = _doc(2, 2, [_layer("road", 2, 2, {(0, 0): 5, (1, 1): 5}),
                        _layer("shed", 2, 2, {(1, 0): 5})],
                 tiles=_WALKABLE_TILES)
    sgrid = TileGrid(slide)
    sgate = MovementGate(sgrid, "road", {5})
    w4 = World()
    p4 = _spawn_player(w4, 8.0, 8.0)
    vel4 = w4.get(p4, Velocity)
    vel4.x, vel4.y = 16.0, 16.0
    n = movement_system(w4, 1.0, sgate,
                        SolidMap(sgrid, ["shed"], slide.gids_with_property("collides")))
    pos4 = w4.get(p4, Position)
    check(n == 1 and (pos4.x, pos4.y) == (8.0, 8.0),
          "Slide onto a non-road tile is refused", f"pos=({pos4.x}, {pos4.y})")
    check((vel4.x, vel4.y) == (0.0, 0.0), "Refused slide zeroes velocity")


def test_input_system():
    print("\n=== 7: Input system ===")
    w = World()
    p = _spawn_player(w, 0.0, 0.0, speed=150.0)
    input_system(w, move=(-1.0, 0.0))
    vel = w.get(p, Velocity)
    check((vel.x, vel.y) == (-150.0, 0.0), "Velocity = direction × speed")
    check(w.get(p, Facing).direction == "left", "Facing follows movement")
    input_system(w, move=(0.0, 1.0))
    check(w.get(p, Facing).direction == "down", "Facing down")
    input_system(w, move=None)
    check((vel.x, vel.y) == (0.0, 150.0), "No input leaves velocity as is")


# ═══════════════════════════════════════════════════════════════════════
#  SECTION 8:  RUNTIME SETUP
# ═══════════════════════════════════════════════════════════════════════

def test_runtime_full_map():
    print("\n=== 8: Runtime on a full map ===")
    tuning.load_dict({"movement": {"spawn_marker": 4}})
    try:
        doc = _doc(10, 6, [
            _layer("Tile Layer 1", 10, 6, fill=1),
            _layer("road", 10, 6, {**{(c, 3): 3 for c in range(10)}, (2, 3): 4}),
            _objects("Objects", [{"id": 1, "name": "SpawnPoint", "x": 5, "y": 5}]),
            _objects("Triggers", [
                {"id": 2, "name": "Shed", "x": 96, "y": 16, "width": 32, "height": 32},
            ], triggering=True),
        ], tiles=_WALKABLE_TILES)
        diag = DiagLog(echo=False)
        rt = build_runtime(doc, diag)
    finally:
        tuning.load_dict({})

    check(rt.walkable_layer == "road", "Walkable layer from the role table")
    check(rt.walkable == {3, 4} and rt.marker == 4, "Walkable ids and marker", str(rt.walkable))
    check(rt.gate.active, "Gate active")
    check((rt.spawn, rt.spawn_source) == ((40.0, 56.0), "marker"), "Spawn on the marker tile")
    check(len(rt.zones) == 1 and rt.zones[0].name == "Shed", "One trigger zone")
    check(rt.threshold == 48.0, "Adaptive radius = 1.5 × 32", str(rt.threshold))
    check("Tile Layer 1" in rt.solids.layers and "road" in rt.solids.layers,
          "Collidable layers feed the solid map")


def test_runtime_minimal_map():
    print("\n=== 9: Runtime on a bare map ===")
    tuning.load_dict({})
    doc = _doc(4, 4, [_layer("ground", 4, 4, fill=1)])
    diag = DiagLog(echo=False)
    rt = build_runtime(doc, diag)

    check(rt.walkable_layer is None and not rt.gate.active, "No road layer → gate off")
    check(rt.spawn_source == "center" and rt.spawn == (32.0, 32.0), "Spawn at map centre")
    check(rt.zones == [] and rt.tracker.update(1.0, 1.0) == [], "No trigger layer → no zones")
    check(rt.tracker.distance_checks == 0, "No distance checks without zones")
    cats = {e["cat"] for e in diag.entries}
    check({"gate", "zones", "spawn", "map"} <= cats, "Degraded subsystems recorded", str(cats))


# ═══════════════════════════════════════════════════════════════════════
#  SECTION 10:  TICK ORDERING
# ═══════════════════════════════════════════════════════════════════════

def test_tick_order():
    print("\n=== 10: Tick pipeline ordering ===")
    tuning.load_dict({})
    doc = _doc(6, 3, [
        _layer("road", 6, 3, fill=3),
        _objects("Triggers", [{"id": 1, "name": "Box", "x": 48, "y": 16,
                               "width": 16, "height": 16}], triggering=True),
    ], tiles=_WALKABLE_TILES)
    rt = build_runtime(doc, DiagLog(echo=False))
    check(rt.threshold == 24.0, "Radius adapts to the small zone", str(rt.threshold))

    w = World()
    bus = EventBus()
    w.set_res(bus)
    w.set_res(GameClock())
    w.set_res(DiagLog(echo=False))
    sink = _Sink()
    ctl = TriggerUIController(sink, anchor_offset=20.0)
    ctl.attach(bus)

    p = _spawn_player(w, 8.0, 24.0)
    tick_systems(w, DT, rt)
    check(not ctl.visible and sink.calls == [], "Far from the zone → no prompt")

    w.get(p, Velocity).x = 120.0
    tick_systems(w, 0.25, rt)
    check(w.get(p, Position).x == 38.0, "Player moved this tick")
    check(ctl.visible and sink.calls == [("show", (56.0, -4.0))],
          "Proximity judged on the new position, prompt shown same frame", str(sink.calls))
    check(w.res(GameClock).frames == 2, "Clock advanced once per tick")

    w.get(p, Velocity).x = 0.0
    for _ in range(5):
        tick_systems(w, DT, rt)
    check(len(sink.calls) == 1, "Standing still → no repeat events")
    check(bus.stats().get("ZoneEntered") == 1, "Exactly one ZoneEntered on the bus")


# ═══════════════════════════════════════════════════════════════════════
#  SECTION 11:  SHIPPED TUNING ON A BARE ROAD
# ═══════════════════════════════════════════════════════════════════════

def test_shipped_tuning_plain_road():
    print("\n=== 11: Shipped tuning, road layer without tile properties ===")
    tuning.load()
    try:
        check(tuning.get("movement", "spawn_marker") == 4, "Shipped file sets a spawn marker")
        doc = _doc(3, 3, [_layer("road", 3, 3, fill=1)])
        rt = build_runtime(doc, DiagLog(echo=False))
    finally:
        tuning.load_dict({})

    check(rt.walkable_layer == "road" and rt.walkable == frozenset(),
          "Road layer found, nothing walkable", str(rt.walkable))
    check(rt.marker == 4 and not rt.gate.active, "Marker kept for spawning, gate off")
    check((rt.spawn, rt.spawn_source) == ((24.0, 24.0), "center"),
          "Spawn falls back to the map centre", str(rt.spawn))
    check(rt.gate.attempt(rt.spawn, (60.0, 0.0), DT) == (60.0, 0.0),
          "Player can walk off the spawn tile")

    w = World()
    p = _spawn_player(w, *rt.spawn)
    w.get(p, Velocity).x = 60.0
    n = movement_system(w, 0.1, rt.gate, rt.solids)
    check(n == 0 and w.get(p, Position).x == 30.0, "Movement system moves the player",
          f"x={w.get(p, Position).x}")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Gate rejection", test_gate_rejects_off_road),
        ("Gate no-op", test_gate_degrades_to_noop),
        ("SpawnLocator", test_spawn_locator),
        ("Spawn chain", test_spawn_fallback_chain),
        ("Walkable discovery", test_walkable_discovery),
        ("Movement system", test_movement_system),
        ("Input system", test_input_system),
        ("Runtime full", test_runtime_full_map),
        ("Runtime minimal", test_runtime_minimal_map),
        ("Tick ordering", test_tick_order),
        ("Shipped tuning", test_shipped_tuning_plain_road),
    ]

    for name, fn in sections:
        try:
            fn()
        except AssertionError:
            pass
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  Movement Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
