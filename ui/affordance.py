"""ui/affordance.py — The floating "[E] Look around" prompt.

A passive view: ``TriggerUIController`` tells it where to sit (a world
point above the active zone) and when to hide.  The prompt is drawn in
screen space every frame, so it follows the camera.
"""

from __future__ import annotations
import pygame

from core.constants import PROMPT_TEXT
from ui.helpers import draw_bubble


class PromptAffordance:
    """World-anchored text bubble.  Implements the affordance sink."""

    def __init__(self, label: str = PROMPT_TEXT):
        self.label = label
        self.anchor: tuple[float, float] | None = None
        self.shown = 0          # show() calls, for HUD / debugging

    @property
    def visible(self) -> bool:
        return self.anchor is not None

    def show(self, anchor: tuple[float, float]) -> None:
        self.anchor = (float(anchor[0]), float(anchor[1]))
        self.shown += 1

    def hide(self) -> None:
        self.anchor = None

    def screen_pos(self, cam_x: float, cam_y: float,
                   zoom: float) -> tuple[int, int] | None:
        """Anchor in screen pixels, or None while hidden."""
        if self.anchor is None:
            return None
        ax, ay = self.anchor
        return int((ax - cam_x) * zoom), int((ay - cam_y) * zoom)

    def draw(self, surface: pygame.Surface, app,
             cam_x: float, cam_y: float, zoom: float) -> None:
        pos = self.screen_pos(cam_x, cam_y, zoom)
        if pos is None:
            return
        draw_bubble(surface, app, pos[0], pos[1], self.label)
