"""ui.helpers — Shared drawing utilities for panels and prompts."""

from __future__ import annotations
import pygame


def draw_overlay(surface: pygame.Surface, alpha: int = 200) -> None:
    """Full-screen semi-transparent dark overlay."""
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_title_bar(
    surface: pygame.Surface, app,
    x: int, y: int, w: int, text: str,
) -> None:
    """Draw a 30 px title bar at the top of a panel."""
    pygame.draw.rect(surface, (50, 50, 75), (x, y, w, 30))
    app.draw_text(surface, text, x + 12, y + 7,
                  (200, 200, 255), font=app.font_lg)


def draw_bubble(
    surface: pygame.Surface, app,
    cx: int, bottom: int, text: str,
    *,
    fg: tuple = (255, 255, 255),
    bg: tuple = (20, 20, 28),
    border: tuple = (200, 200, 120),
) -> pygame.Rect:
    """Draw a text bubble horizontally centred on *cx*, resting on *bottom*.

    Returns the bubble ``Rect``.
    """
    font = app.font_sm
    tw, th = font.size(text)
    rect = pygame.Rect(0, 0, tw + 12, th + 6)
    rect.midbottom = (cx, bottom)
    pygame.draw.rect(surface, bg, rect)
    pygame.draw.rect(surface, border, rect, 1)
    app.draw_text(surface, text, rect.x + 6, rect.y + 3, fg, font=font)
    return rect
