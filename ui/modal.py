"""ui.modal — Abstract Modal base class and ModalStack manager.

Every auxiliary view (zone info, confirm prompt, …) is a ``Modal``
subclass.  ``ModalStack`` keeps them layered, routes events to the
topmost one, and tells the scene when the stack opens or empties so it
can flip the input context and the prompt.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, TYPE_CHECKING

import pygame

if TYPE_CHECKING:
    from ui.commands import UICommand


class Modal(ABC):
    """Base class for all UI modals."""

    def on_open(self) -> None:
        """Called when this modal is pushed onto the stack."""

    def on_close(self) -> None:
        """Called when this modal is popped from the stack."""

    @abstractmethod
    def update(self, dt: float) -> None:
        """Tick timers, animations, etc.  Called once per frame."""

    @abstractmethod
    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        """Process one pygame event.

        Returns a (possibly empty) list of commands for the scene to
        execute.  Modals never reach into scene state themselves.
        """

    @abstractmethod
    def draw(self, surface: pygame.Surface, app) -> None:
        """Render the modal onto *surface*."""


# ────────────────────────────────────────────────────────────────────
# Modal stack
# ────────────────────────────────────────────────────────────────────

class ModalStack:
    """Ordered stack of ``Modal`` overlays.

    ``on_change(is_open)`` fires on the first push and on the pop that
    empties the stack, never in between.
    """

    __slots__ = ("_stack", "on_change")

    def __init__(self, on_change: Callable[[bool], None] | None = None) -> None:
        self._stack: list[Modal] = []
        self.on_change = on_change

    @property
    def active(self) -> Modal | None:
        """The topmost modal, or *None* if the stack is empty."""
        return self._stack[-1] if self._stack else None

    @property
    def is_open(self) -> bool:
        return bool(self._stack)

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, modal: Modal) -> None:
        was_open = self.is_open
        self._stack.append(modal)
        modal.on_open()
        if not was_open and self.on_change:
            self.on_change(True)

    def pop(self) -> Modal | None:
        if not self._stack:
            return None
        modal = self._stack.pop()
        modal.on_close()
        if not self._stack and self.on_change:
            self.on_change(False)
        return modal

    def clear(self) -> None:
        while self._stack:
            self.pop()

    # ── per-frame dispatch ──────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> list:
        if self._stack:
            return self._stack[-1].handle_event(event)
        return []

    def update(self, dt: float) -> None:
        if self._stack:
            self._stack[-1].update(dt)

    def draw(self, surface: pygame.Surface, app) -> None:
        """Draw all modals bottom-to-top."""
        for modal in self._stack:
            modal.draw(surface, app)
