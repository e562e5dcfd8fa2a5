"""
scenes/explore_scene.py — Top-down map exploration

Loads a Tiled map, drops the player on the road, and lets them walk
around.  Walking near a trigger zone floats a "[E] Look around" prompt
above it; pressing interact opens the zone info panel.

WASD / arrows to move, E / Enter to interact, Tab for the debug
overlay, F5 to reload the map and tuning.
"""

from __future__ import annotations
from pathlib import Path

import pygame
from core.scene import Scene
from core.app import App
from core.constants import (
    DEFAULT_MAP_PATH, PLAYER_SPEED, ANCHOR_OFFSET, PROMPT_TEXT,
    CAMERA_ZOOM, DIAG_MIN_INTERVAL, DIAG_ECHO,
)
from core.diag import DiagLog
from core.ecs import World
from core.events import EventBus
from core.tilemap import MapFormatError, load_map
from core import tuning
from components import (
    Position, Velocity, Collider, Facing, Sprite, Identity,
    Player, Camera, GameClock,
)
from logic.input_manager import InputManager, InputContext, binds_from_names
from logic.runtime import MapRuntime, build_runtime
from logic.tick import tick_systems, input_system
from logic.trigger_ui import TriggerUIController
from ui import CloseModal, ModalStack, PromptAffordance, ZoneInfoModal
from scenes.explore_draw import (
    TileAtlas, draw_layers, draw_player, draw_zones, draw_hud,
    draw_debug_overlay,
)


class ExploreScene(Scene):
    title = "explore"

    def __init__(self, map_path: str | None = None, tuning_path: str | None = None):
        self.map_path = map_path
        self.tuning_path = tuning_path
        self.world = World()
        self.rt: MapRuntime | None = None
        self.player = -1
        self.show_debug = False

        self.input = InputManager()
        self.modals = ModalStack(on_change=self._on_modal_change)
        self.prompt = PromptAffordance()
        self.controller: TriggerUIController | None = None
        self.atlas: TileAtlas | None = None

    # ── setup ────────────────────────────────────────────────────────

    def load(self) -> None:
        """Read tuning and the map, then build the world.

        Raises ``MapFormatError`` / ``FileNotFoundError`` if the map
        can't be read, ``tuning.TOMLDecodeError`` if the tuning file is
        malformed.  Nothing in the scene is touched in either case.
        """
        tuning.load(self.tuning_path)
        path = Path(self.map_path or tuning.get("map", "path", DEFAULT_MAP_PATH))
        if not path.is_absolute() and not path.exists():
            # Relative to the project root, like data/tuning.toml
            path = Path(__file__).resolve().parent.parent / path
        doc = load_map(path)
        self.map_path = str(path)

        diag = DiagLog(
            min_interval=float(tuning.get("diag", "min_interval", DIAG_MIN_INTERVAL)),
            echo=bool(tuning.get("diag", "echo", DIAG_ECHO)),
        )
        self.input = InputManager(binds_from_names(tuning.section("keys")))
        self.rt = build_runtime(doc, diag)
        self.title = path.name

        w = self.world
        w.set_res(diag)
        w.set_res(GameClock())
        w.set_res(Camera(x=self.rt.spawn[0], y=self.rt.spawn[1],
                         zoom=float(tuning.get("camera", "zoom", CAMERA_ZOOM))))
        bus = EventBus(on_error=lambda name, exc: diag.record(
            "event", f"{name} handler failed: {exc}"))
        w.set_res(bus)

        self.player = w.spawn()
        w.add(self.player, Position(x=self.rt.spawn[0], y=self.rt.spawn[1]))
        w.add(self.player, Velocity())
        w.add(self.player, Collider())
        w.add(self.player, Facing())
        w.add(self.player, Sprite(char="@", color=(255, 255, 100)))
        w.add(self.player, Identity(name="You", kind="player"))
        w.add(self.player, Player(speed=float(tuning.get("movement", "speed", PLAYER_SPEED))))

        self.prompt = PromptAffordance(str(tuning.get("ui", "prompt", PROMPT_TEXT)))
        self.controller = TriggerUIController(
            self.prompt,
            action=self._open_zone_info,
            anchor_offset=float(tuning.get("ui", "anchor_offset", ANCHOR_OFFSET)),
        )
        self.controller.attach(bus)
        self.atlas = TileAtlas(doc)

    def on_enter(self, app: App):
        if self.rt is None:
            self.load()

    def on_exit(self, app: App):
        self.modals.clear()

    def _open_zone_info(self):
        if self.controller and self.controller.zone is not None:
            self.modals.push(ZoneInfoModal(self.controller.zone))

    def _on_modal_change(self, is_open: bool):
        self.input.context = InputContext.UI if is_open else InputContext.GAMEPLAY

    def _reload(self, app: App):
        """Rebuild from disk; keep the current map if the new one is broken."""
        fresh = ExploreScene(self.map_path, self.tuning_path)
        try:
            fresh.load()
        except (MapFormatError, OSError, tuning.TOMLDecodeError) as ex:
            diag = self.world.res(DiagLog)
            if diag:
                diag.record("map", f"reload failed: {ex}")
            return
        fresh.show_debug = self.show_debug
        app.replace_scene(fresh)

    # ── event handler ────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event, app: App):
        self.input.feed(event)

        if self.modals.is_open and event.type in (
                pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN):
            for cmd in self.modals.handle_event(event):
                if isinstance(cmd, CloseModal):
                    self.modals.pop()

    # ── update ───────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        if self.rt is None:
            return
        self.input.end_frame()

        if self.input.just("toggle_debug"):
            self.show_debug = not self.show_debug

        move = (0.0, 0.0)
        if self.input.context == InputContext.GAMEPLAY:
            if self.input.just("reload"):
                self.input.begin_frame()
                self._reload(app)
                return
            if self.input.just("interact") and self.controller:
                self.controller.activate()
            move = self.input.movement()

        input_system(self.world, move=move)
        self.input.begin_frame()
        self.modals.update(dt)

        tick_systems(self.world, dt, self.rt)

        self._follow_camera(app)

    def _follow_camera(self, app: App):
        cam = self.world.res(Camera)
        pos = self.world.get(self.player, Position)
        if cam is None or pos is None:
            return
        vw, vh = app.size
        cam.x = _clamp_axis(pos.x, vw / cam.zoom, self.rt.grid.width_px)
        cam.y = _clamp_axis(pos.y, vh / cam.zoom, self.rt.grid.height_px)

    # ── draw ─────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((20, 20, 25))
        if self.rt is None:
            return
        cam = self.world.res(Camera) or Camera()
        sw, sh = surface.get_size()
        # World point at the top-left of the view
        left = cam.x - sw / (2 * cam.zoom)
        top = cam.y - sh / (2 * cam.zoom)

        draw_layers(surface, self.rt, self.atlas, left, top, cam.zoom)
        draw_player(surface, app, self.world, left, top, cam.zoom)

        if self.show_debug:
            draw_zones(surface, self.rt, left, top, cam.zoom)

        if not self.modals.is_open:
            self.prompt.draw(surface, app, left, top, cam.zoom)

        draw_hud(surface, app, self)

        if self.modals.is_open:
            self.modals.draw(surface, app)

        if self.show_debug:
            draw_debug_overlay(surface, app, self)


def _clamp_axis(target: float, view: float, extent: float) -> float:
    """Centre the view on *target* without showing past the map edge."""
    if extent <= view:
        return extent / 2
    half = view / 2
    return max(half, min(extent - half, target))
