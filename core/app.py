"""
core/app.py — Pygame application shell

Owns the window, the main loop and the scene stack.  Everything is
rendered to a fixed virtual surface and scaled to the window, so
scenes never care about the real window size.

    app = App(title="Roadside", width=960, height=640)
    app.push_scene(ExploreScene("data/maps/roadside.tmj"))
    app.run()
"""

from __future__ import annotations
import pygame
from core.scene import Scene

# Longest frame the simulation will step.  A stalled window (drag,
# breakpoint) otherwise produces one huge dt that skips the gate checks.
MAX_DT = 0.1


class App:
    def __init__(self, title: str = "Roadside", width: int = 960, height: int = 640,
                 fps: int = 60):
        pygame.init()
        self.title = title
        self._windowed_size = (width, height)
        self._virtual_size = (width, height)
        self._render_surface = pygame.Surface((width, height))
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.running = True
        self.fullscreen = False
        self.fps = fps
        self.dt = 0.0

        # Only the top scene is driven
        self._scenes: list[Scene] = []

        self.font = pygame.font.SysFont("monospace", 14)
        self.font_sm = pygame.font.SysFont("monospace", 11)
        self.font_lg = pygame.font.SysFont("monospace", 18)

    @property
    def size(self) -> tuple[int, int]:
        """Virtual (design) resolution every scene draws at."""
        return self._virtual_size

    # -- Scene management --

    @property
    def scene(self) -> Scene | None:
        return self._scenes[-1] if self._scenes else None

    def push_scene(self, scene: Scene):
        if self._scenes:
            self._scenes[-1].on_exit(self)
        self._scenes.append(scene)
        scene.on_enter(self)
        self._update_caption()

    def replace_scene(self, scene: Scene):
        """Swap the top scene without revealing the one below."""
        if self._scenes:
            self._scenes[-1].on_exit(self)
            self._scenes.pop()
        self._scenes.append(scene)
        scene.on_enter(self)
        self._update_caption()

    def quit(self):
        self.running = False

    def _update_caption(self):
        sub = self.scene.title if self.scene else ""
        pygame.display.set_caption(f"{self.title} — {sub}" if sub else self.title)

    # -- Coordinate mapping --

    def _remap_mouse_event(self, event: pygame.event.Event) -> pygame.event.Event:
        """Return a copy of *event* with .pos mapped to virtual coords."""
        if not hasattr(event, "pos"):
            return event
        sw, sh = self.screen.get_size()
        vw, vh = self._virtual_size
        attrs = {a: getattr(event, a) for a in ("button", "buttons", "rel")
                 if hasattr(event, a)}
        attrs["pos"] = (int(event.pos[0] * vw / sw), int(event.pos[1] * vh / sh))
        return pygame.event.Event(event.type, **attrs)

    # -- Main loop --

    def run(self):
        while self.running and self.scene:
            self.dt = min(self.clock.tick(self.fps) / 1000.0, MAX_DT)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
                    self.toggle_fullscreen()
                elif event.type == pygame.VIDEORESIZE and not self.fullscreen:
                    self._windowed_size = (event.w, event.h)
                    self.screen = pygame.display.set_mode(
                        (event.w, event.h), pygame.RESIZABLE)
                elif self.scene:
                    if event.type in (pygame.MOUSEBUTTONDOWN,
                                      pygame.MOUSEBUTTONUP,
                                      pygame.MOUSEMOTION):
                        event = self._remap_mouse_event(event)
                    self.scene.handle_event(event, self)

            if self.scene:
                self.scene.update(self.dt, self)
            if self.scene:
                self.scene.draw(self._render_surface, self)

            pygame.transform.scale(self._render_surface,
                                   self.screen.get_size(), self.screen)
            pygame.display.flip()

        pygame.quit()

    def toggle_fullscreen(self):
        """Switch between windowed and fullscreen (F11)."""
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(
                self._windowed_size, pygame.RESIZABLE)

    # -- Convenience --

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None):
        """Quick text draw. Returns the rect for layout chaining."""
        f = font or self.font
        return surface.blit(f.render(text, True, color), (x, y))

    def draw_text_bg(self, surface: pygame.Surface, text: str, x: int, y: int,
                     color=(255, 255, 255), bg=(0, 0, 0, 160), font=None,
                     pad: int = 2):
        """Draw text with a semi-transparent background box."""
        f = font or self.font
        img = f.render(text, True, color)
        w, h = img.get_size()
        bg_surf = pygame.Surface((w + pad * 2, h + pad * 2), pygame.SRCALPHA)
        bg_surf.fill(bg)
        surface.blit(bg_surf, (x - pad, y - pad))
        return surface.blit(img, (x, y))
