"""scenes/explore_draw.py — Drawing helpers for ExploreScene.

Every function takes the view's top-left world point (``left``, ``top``)
and the camera zoom; a world pixel ``(x, y)`` lands on screen at
``((x - left) * zoom, (y - top) * zoom)``.
"""

from __future__ import annotations
import math
from pathlib import Path

import pygame
from core.app import App
from core.constants import ROLE_COLORS, TILE_COLORS, ZONE_COLOR, ZONE_ACTIVE_COLOR
from core import tuning
from core.diag import DiagLog
from core.events import EventBus
from core.layers import by_depth
from core.tilemap import MapDocument, Tileset
from components import Position, Sprite, Collider, GameClock, Player


# ── Tileset images ──────────────────────────────────────────────────

class TileAtlas:
    """Lazily cuts tileset images into per-gid surfaces.

    Tilesets whose image is missing or unreadable fall back to flat
    colours (by layer role).  Scaled tiles are cached per zoom level.
    """

    def __init__(self, doc: MapDocument):
        self.doc = doc
        self._base = Path(doc.source).parent if doc.source else Path(".")
        self._sheets: dict[int, pygame.Surface | None] = {}
        self._tiles: dict[tuple[int, int], pygame.Surface | None] = {}

    def _sheet(self, ts: Tileset) -> pygame.Surface | None:
        if ts.firstgid in self._sheets:
            return self._sheets[ts.firstgid]
        sheet = None
        if ts.image:
            path = self._base / ts.image
            try:
                sheet = pygame.image.load(str(path))
            except (pygame.error, FileNotFoundError) as ex:
                print(f"[MAP] tileset image {path} unavailable ({ex}) — flat colours")
        self._sheets[ts.firstgid] = sheet
        return sheet

    def tile(self, gid: int, size: int) -> pygame.Surface | None:
        key = (gid, size)
        if key in self._tiles:
            return self._tiles[key]
        surf = None
        ts = self.doc.tileset_for(gid)
        sheet = self._sheet(ts) if ts else None
        if sheet is not None and ts.columns > 0:
            local = gid - ts.firstgid
            col, row = local % ts.columns, local // ts.columns
            x = ts.margin + col * (ts.tile_width + ts.spacing)
            y = ts.margin + row * (ts.tile_height + ts.spacing)
            rect = pygame.Rect(x, y, ts.tile_width, ts.tile_height)
            if sheet.get_rect().contains(rect):
                surf = pygame.transform.scale(sheet.subsurface(rect), (size, size))
        self._tiles[key] = surf
        return surf


def _shade(color: tuple, gid: int) -> tuple:
    """Vary a flat colour slightly by gid so neighbouring tiles read apart."""
    k = 0.85 + 0.05 * (gid % 4)
    return tuple(min(255, int(c * k)) for c in color)


# ── Map layers ──────────────────────────────────────────────────────

def draw_layers(surface: pygame.Surface, rt, atlas: TileAtlas | None,
                left: float, top: float, zoom: float):
    grid = rt.grid
    tw, th = grid.tile_width, grid.tile_height
    size = max(1, int(math.ceil(tw * zoom)))
    sw, sh = surface.get_size()

    c0 = max(0, int(left // tw))
    r0 = max(0, int(top // th))
    c1 = min(grid.width, int((left + sw / zoom) // tw) + 1)
    r1 = min(grid.height, int((top + sh / zoom) // th) + 1)

    for spec in by_depth(rt.specs):
        base = ROLE_COLORS.get(spec.role.value, (255, 0, 255))
        for row in range(r0, r1):
            for col in range(c0, c1):
                gid = grid.tile_at(spec.name, col, row)
                if gid is None:
                    continue
                sx = int((col * tw - left) * zoom)
                sy = int((row * th - top) * zoom)
                img = atlas.tile(gid, size) if atlas else None
                if img is not None:
                    surface.blit(img, (sx, sy))
                else:
                    color = TILE_COLORS.get(gid) or _shade(base, gid)
                    pygame.draw.rect(surface, color, (sx, sy, size, size))


# ── Player ──────────────────────────────────────────────────────────

def draw_player(surface: pygame.Surface, app: App, world,
                left: float, top: float, zoom: float):
    for eid, _, pos, sprite in world.query(Player, Position, Sprite):
        col = world.get(eid, Collider)
        bw = (col.width if col else 12.0) * zoom
        bh = (col.height if col else 12.0) * zoom
        sx = (pos.x - left) * zoom
        sy = (pos.y - top) * zoom
        rect = pygame.Rect(int(sx - bw / 2), int(sy - bh / 2), int(bw), int(bh))
        pygame.draw.rect(surface, (40, 40, 20), rect)
        pygame.draw.rect(surface, sprite.color, rect, 1)
        tw, th = app.font.size(sprite.char)
        app.draw_text(surface, sprite.char, int(sx - tw / 2), int(sy - th / 2),
                      sprite.color)


# ── Trigger zones (debug) ───────────────────────────────────────────

def draw_zones(surface: pygame.Surface, rt, left: float, top: float, zoom: float):
    active = rt.tracker.active
    radius = max(1, int(rt.threshold * zoom))
    for zone in rt.zones:
        b = zone.bounds
        color = ZONE_ACTIVE_COLOR if zone is active else ZONE_COLOR
        rect = pygame.Rect(
            int((b.left - left) * zoom), int((b.top - top) * zoom),
            int((b.right - b.left) * zoom), int((b.bottom - b.top) * zoom),
        )
        pygame.draw.rect(surface, color, rect, 1)
        cx = int((zone.center[0] - left) * zoom)
        cy = int((zone.center[1] - top) * zoom)
        pygame.draw.circle(surface, color, (cx, cy), radius, 1)
        pygame.draw.circle(surface, color, (cx, cy), 2)


# ── HUD ─────────────────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App, scene):
    sw, sh = surface.get_size()
    pos = scene.world.get(scene.player, Position)
    if pos is not None:
        col, row = scene.rt.grid.world_to_tile(pos.x, pos.y)
        app.draw_text_bg(surface, f"({pos.x:.0f}, {pos.y:.0f})  tile {col},{row}",
                         8, 8, (200, 220, 200), font=app.font_sm)
    app.draw_text_bg(surface, f"zone: {scene.rt.tracker.state}", 8, 24,
                     (200, 200, 255), font=app.font_sm)
    app.draw_text_bg(surface, "[WASD] move  [E] interact  [Tab] debug  [F5] reload",
                     8, sh - 20, (140, 160, 180), font=app.font_sm)


# ── Debug overlay ───────────────────────────────────────────────────

def draw_debug_overlay(surface: pygame.Surface, app: App, scene):
    rt = scene.rt
    sw, sh = surface.get_size()
    panel_w = 340
    panel_bg = pygame.Surface((panel_w, sh - 60), pygame.SRCALPHA)
    panel_bg.fill((0, 0, 0, 150))
    x0 = sw - panel_w - 4
    surface.blit(panel_bg, (x0, 4))

    x = x0 + 6
    y = 10
    green = (0, 255, 0)
    lines = [
        f"FPS: {int(app.clock.get_fps())}",
        f"Map: {rt.grid!r}",
        f"Walkable layer: {rt.walkable_layer or '-'}  ids: {sorted(rt.walkable)}",
        f"Gate: {'on' if rt.gate.active else 'off'}  "
        f"ok {rt.gate.accepted}  rejected {rt.gate.rejected}",
        f"Spawn: ({rt.spawn[0]:.0f}, {rt.spawn[1]:.0f}) via {rt.spawn_source}",
        f"Zones: {len(rt.zones)}  radius {rt.threshold:.1f}px",
        f"Tracker: {rt.tracker.state}  dist checks {rt.tracker.distance_checks}",
        f"Prompt: {'shown' if scene.prompt.visible else 'hidden'}",
        f"Tuning: {tuning.source().name if tuning.source() else 'defaults'}",
    ]
    clock = scene.world.res(GameClock)
    if clock:
        lines.append(f"Clock: {clock.time:.1f}s  frame {clock.frames}")
    bus = scene.world.res(EventBus)
    if bus:
        delivered = sum(bus.stats().values())
        lines.append(f"Events: {delivered} delivered  {bus.errors} handler errors")
    for line in lines:
        app.draw_text(surface, line, x, y, green, app.font_sm)
        y += 14

    diag = scene.world.res(DiagLog)
    if diag is None:
        return
    y += 6
    app.draw_text(surface, f"— diagnostics ({diag.suppressed} suppressed) —",
                  x, y, (100, 200, 180), app.font_sm)
    y += 16
    rows = max(0, (sh - 70 - y) // 13)
    for entry in diag.recent(rows):
        app.draw_text(surface, f"[{entry['cat']}] {entry['msg']}", x, y,
                      (200, 200, 200), app.font_sm)
        y += 13
