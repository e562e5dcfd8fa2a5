"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.
Every value here is the code default for a key in ``data/tuning.toml``.

Unit System
-----------
All positions, sizes and distances are **pixels** in map space, the
same space Tiled writes object coordinates in.  Speeds are px/s.
The camera zoom only affects rendering.
"""

# ── Map ─────────────────────────────────────────────────────────────
DEFAULT_MAP_PATH = "data/maps/roadside.tmj"
DEFAULT_TILE_SIZE = 16           # px, used when a document omits it

# Tiled stores flip / rotation flags in the top bits of every gid.
GID_MASK = 0x0FFFFFFF

# ── Player ──────────────────────────────────────────────────────────
PLAYER_SPEED = 150.0             # px/s
PLAYER_HITBOX = 12.0             # px, square collider centred on Position
PLAYER_DEPTH = 100               # above every map layer

# ── Movement constraint ─────────────────────────────────────────────
WALKABLE_LAYER = "road"
SPAWN_LAYER = ""                 # empty → same as the walkable layer

# ── Triggers ────────────────────────────────────────────────────────
TRIGGER_PROPERTY = "triggering"
PROXIMITY_THRESHOLD = 50.0       # px, default fixed radius
PROXIMITY_FLOOR = 20.0           # px, lower bound for the adaptive radius
PROXIMITY_SCALE = 1.5

# ── Spawn fallbacks ─────────────────────────────────────────────────
SPAWN_OBJECT_LAYER = "Objects"
SPAWN_OBJECT_NAME = "SpawnPoint"

# ── UI ──────────────────────────────────────────────────────────────
ANCHOR_OFFSET = 20.0             # px above the zone's top edge
PROMPT_TEXT = "[E] Look around"

# ── Camera ──────────────────────────────────────────────────────────
CAMERA_ZOOM = 2.0

# ── Diagnostics ─────────────────────────────────────────────────────
DIAG_MIN_INTERVAL = 1.0          # s between repeats of one message
DIAG_ECHO = True

# Fallback palette when no tileset image is available: gid → color
TILE_COLORS = {
    0: (40, 40, 40),
}
ROLE_COLORS = {
    "ground":   (58, 92, 48),
    "walkable": (120, 104, 80),
    "solid":    (92, 70, 56),
    "decor":    (70, 110, 70),
    "overlay":  (90, 120, 140),
}
ZONE_COLOR = (255, 210, 80)
ZONE_ACTIVE_COLOR = (120, 255, 120)
