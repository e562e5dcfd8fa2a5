"""components.rendering — Visual identity and display."""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import PLAYER_DEPTH


@dataclass
class Identity:
    name: str = "unnamed"
    kind: str = "player"


@dataclass
class Sprite:
    char: str = "?"            # single character for debug rendering
    color: tuple = (255, 255, 255)
    depth: int = PLAYER_DEPTH  # draw order relative to map layers
