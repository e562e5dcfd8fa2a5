"""components.resources — World-level singletons (not per-entity)."""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import CAMERA_ZOOM, PLAYER_SPEED


@dataclass
class GameClock:
    """Monotonic scene time — accumulated ``dt`` since the scene started.

    Updated once per frame by ``tick_systems``.
    """
    time: float = 0.0
    frames: int = 0


@dataclass
class Camera:
    x: float = 0.0             # px, world point at the view centre
    y: float = 0.0
    zoom: float = CAMERA_ZOOM


@dataclass
class Player:
    """Marks the player entity."""
    speed: float = PLAYER_SPEED    # pixels per second
