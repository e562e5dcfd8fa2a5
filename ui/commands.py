"""ui.commands — Command objects emitted by modals.

Modals return these instead of directly mutating game state that lives
outside their scope.  The scene reads the list and applies each effect.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class CloseModal:
    """Pop the top modal off the stack."""


# Union of every command type.
UICommand = Union[CloseModal]
