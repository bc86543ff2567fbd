from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol, runtime_checkable

__all__ = ["FormCapability", "DeferredBool"]

DeferredBool = Future


@runtime_checkable
class FormCapability(Protocol):
    """Anything on screen that can say whether it is safe to leave.

    ``can_deactivate`` must be side-effect free and answerable whenever the
    screen is mounted. ``True`` means there is nothing unsaved.
    """

    def can_deactivate(self) -> bool | DeferredBool: ...
