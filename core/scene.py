"""
core/scene.py — Scene interface

The app holds a stack of scenes; only the top one is driven.  The
explore scene is the only one the game ships, but reloading a map is
done by replacing it with a fresh instance, so the hooks stay small:

    class MyScene(Scene):
        def on_enter(self, app): ...      # load, build world
        def on_exit(self, app): ...       # drop references
        def handle_event(self, event, app): ...
        def update(self, dt, app): ...    # dt in seconds
        def draw(self, surface, app): ...
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    #: Shown in the window caption while this scene is on top.
    title: str = ""

    def on_enter(self, app: App):
        """Called when this scene becomes active (pushed or revealed)."""

    def on_exit(self, app: App):
        """Called when this scene is removed or covered."""

    def handle_event(self, event: pygame.event.Event, app: App):
        """Process a single pygame event."""

    def update(self, dt: float, app: App):
        """Advance the scene. dt is seconds, already clamped by the app."""

    def draw(self, surface: pygame.Surface, app: App):
        """Draw to the virtual surface."""
