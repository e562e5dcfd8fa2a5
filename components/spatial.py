"""components.spatial — Position, movement, and collision shapes.

All coordinates and dimensions are in map pixels.  ``Position`` is the
centre of the entity, the same anchor the sprite is drawn from.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import PLAYER_HITBOX


@dataclass
class Position:
    x: float = 0.0        # px
    y: float = 0.0        # px


@dataclass
class Velocity:
    x: float = 0.0        # px/s
    y: float = 0.0        # px/s


@dataclass
class Collider:
    width: float = PLAYER_HITBOX    # px
    height: float = PLAYER_HITBOX   # px
    solid: bool = True


@dataclass
class Facing:
    """Which direction an entity faces.  Updated from Velocity each frame.

    Values: 'right', 'left', 'up', 'down'
    Used by sprite rendering (the player sprite flips when facing left).
    """
    direction: str = "down"
