"""ui — Prompt + modal UI framework.

Provides a ``ModalStack`` that manages layered modal overlays and the
``PromptAffordance`` that floats above an active trigger zone.  Each
modal is a self-contained ``Modal`` subclass with its own update /
input / draw.
"""

from ui.modal import Modal, ModalStack
from ui.commands import CloseModal, UICommand
from ui.affordance import PromptAffordance
from ui.zone_modal import ZoneInfoModal

__all__ = [
    "Modal", "ModalStack",
    "CloseModal", "UICommand",
    "PromptAffordance", "ZoneInfoModal",
]
