"""ui/zone_modal.py — What the player sees after pressing interact."""

from __future__ import annotations
import pygame
from ui.modal import Modal
from ui.commands import CloseModal, UICommand
from ui.helpers import draw_overlay, draw_title_bar


class ZoneInfoModal(Modal):
    """Describes the trigger zone the player is standing near.

    Text comes from the zone object's ``description`` property if the
    map author gave one, otherwise a generic line.
    """

    def __init__(self, zone, description: str = ""):
        self._zone = zone
        self._title = zone.label
        self._text = (description or zone.description
                      or f"You look around {self._title}.")
        w, h = zone.size
        self._meta = f"zone #{zone.id}  {w:.0f}x{h:.0f} px"
        self._lines: list[str] = self._text.split("\n")

    @property
    def zone(self):
        return self._zone

    # ── Modal interface ──────────────────────────────────────────────

    def update(self, dt: float):
        pass

    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_ESCAPE, pygame.K_e, pygame.K_RETURN):
                return [CloseModal()]
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            return [CloseModal()]
        return []

    def draw(self, surface: pygame.Surface, app):
        draw_overlay(surface, alpha=140)
        sw, sh = surface.get_size()

        box_w = min(420, sw - 40)
        box_h = 74 + 22 * len(self._lines) + 30
        box_x = (sw - box_w) // 2
        box_y = (sh - box_h) // 2

        pygame.draw.rect(surface, (30, 30, 35), (box_x, box_y, box_w, box_h))
        pygame.draw.rect(surface, (100, 100, 110), (box_x, box_y, box_w, box_h), 2)
        draw_title_bar(surface, app, box_x, box_y, box_w, self._title)

        app.draw_text(surface, self._meta, box_x + 16, box_y + 38,
                      (150, 150, 180), font=app.font_sm)
        y = box_y + 58
        for line in self._lines:
            app.draw_text(surface, line, box_x + 16, y, (220, 220, 220))
            y += 22

        app.draw_text(surface, "[Esc] close", box_x + 16, box_y + box_h - 24,
                      (140, 140, 150), font=app.font_sm)
