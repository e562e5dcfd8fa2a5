"""components — ECS component dataclasses, organised by domain.

Submodules
----------
spatial        Position, Velocity, Collider, Facing
rendering      Identity, Sprite
resources      Camera, GameClock, Player

All public names are re-exported here so code can do
``from components import Position``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Position, Velocity, Collider, Facing

# ── Rendering ────────────────────────────────────────────────────────
from components.rendering import Identity, Sprite

# ── World resources / singletons ─────────────────────────────────────
from components.resources import Camera, GameClock, Player

__all__ = [
    # spatial
    "Position", "Velocity", "Collider", "Facing",
    # rendering
    "Identity", "Sprite",
    # resources
    "Camera", "GameClock", "Player",
]
