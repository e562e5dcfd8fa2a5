"""logic/input_manager.py — Intent-based input layer.

Raw pygame keys become *intents* ("move_up", "interact", ...) so the
scene and systems never test keycodes.  Which intents are live
depends on the **input context**: while a modal is open only the
debug toggle gets through, and the modal reads its own keys.

Per frame, in the explore scene:

    for event in events:
        self.input.feed(event)
    self.input.end_frame()          # held-key snapshot
    if self.input.just("interact"):
        ...
    move = self.input.movement()    # (dx, dy), length ≤ 1
    self.input.begin_frame()
"""

from __future__ import annotations
from enum import Enum, auto
from typing import Mapping, Sequence

import pygame


class InputContext(Enum):
    """Determines which key-bindings are active."""
    GAMEPLAY = auto()   # walking around the map
    UI       = auto()   # auxiliary view open


Bindings = dict[str, tuple[int, ...]]

GAMEPLAY_BINDS: Bindings = {
    "move_up":      (pygame.K_w, pygame.K_UP),
    "move_down":    (pygame.K_s, pygame.K_DOWN),
    "move_left":    (pygame.K_a, pygame.K_LEFT),
    "move_right":   (pygame.K_d, pygame.K_RIGHT),
    "interact":     (pygame.K_e, pygame.K_RETURN),
    "toggle_debug": (pygame.K_TAB,),
    "reload":       (pygame.K_F5,),
}

# Modals read their own keys; only the overlay toggle stays live.
UI_INTENTS = frozenset({"toggle_debug"})

_MOVES = (("move_left", -1.0, 0.0), ("move_right", 1.0, 0.0),
          ("move_up", 0.0, -1.0), ("move_down", 0.0, 1.0))


def binds_from_names(names: Mapping[str, Sequence[str]],
                     base: Bindings = GAMEPLAY_BINDS) -> Bindings:
    """Overlay ``{intent: ["e", "space"]}`` key names onto *base*.

    Names are pygame's (``pygame.key.key_code``).  Unknown names are
    reported and skipped; an intent left with no keys keeps its default.
    """
    binds = dict(base)
    for intent, keys in names.items():
        if isinstance(keys, str):
            keys = [keys]
        codes = []
        for name in keys:
            try:
                codes.append(pygame.key.key_code(str(name)))
            except ValueError:
                print(f"[INPUT] unknown key {name!r} for {intent}")
        if codes:
            binds[intent] = tuple(codes)
    return binds


class InputManager:
    """Context-aware input mapper.

    ``feed(event)`` for each pygame event, ``end_frame()`` after the
    last one, ``begin_frame()`` once the frame's intents are consumed.
    ``just`` is a rising edge, ``held`` is the key-down state.
    """

    def __init__(self, binds: Bindings | None = None):
        self.binds: Bindings = dict(binds or GAMEPLAY_BINDS)
        self.context: InputContext = InputContext.GAMEPLAY
        self._pressed: set[str] = set()
        self._held: set[str] = set()

    def active_intents(self) -> list[str]:
        if self.context == InputContext.UI:
            return [i for i in self.binds if i in UI_INTENTS]
        return list(self.binds)

    def begin_frame(self):
        self._pressed.clear()

    def feed(self, event: pygame.event.Event):
        if event.type != pygame.KEYDOWN:
            return
        for intent in self.active_intents():
            if event.key in self.binds[intent]:
                self._pressed.add(intent)

    def end_frame(self):
        keys = pygame.key.get_pressed()
        self._held = {intent for intent in self.active_intents()
                      if any(keys[k] for k in self.binds[intent])}

    def just(self, intent: str) -> bool:
        return intent in self._pressed

    def held(self, intent: str) -> bool:
        return intent in self._held

    def press(self, intent: str) -> None:
        """Inject a discrete intent (scripted input, tests)."""
        self._pressed.add(intent)

    def hold(self, *intents: str) -> None:
        """Replace the held set (scripted input, tests)."""
        self._held = set(intents)

    def movement(self) -> tuple[float, float]:
        """Unit-length (or zero) movement vector from the held intents."""
        dx = sum((x for intent, x, _ in _MOVES if self.held(intent)), 0.0)
        dy = sum((y for intent, _, y in _MOVES if self.held(intent)), 0.0)
        mag = (dx * dx + dy * dy) ** 0.5
        if mag > 1.0:
            dx /= mag
            dy /= mag
        return dx, dy
