"""Shared screen composition helpers for Tkinter views."""

from collections.abc import Callable
from contextlib import contextmanager
import tkinter as tk
from tkinter import ttk

__all__ = ["BaseScreen"]


class BaseScreen(ttk.Frame):
    """
    Base pattern for app screens that hold editable form state.

    Screens mark themselves dirty when the user edits something and clean
    after save/load. ``can_deactivate()`` exposes that to the navigation
    guard, so any BaseScreen can be protected against losing edits.
    """

    def __init__(self, parent: tk.Widget) -> None:
        super().__init__(parent)
        self.status_var = tk.StringVar(value="Ready.")
        self._dirty = False
        self._dirty_suspended = 0
        self._dirty_indicator_var = tk.StringVar(value="")

    def build(self) -> None:
        raise NotImplementedError("Screen subclasses should implement build().")

    def build_header(
        self,
        parent: ttk.Frame,
        *,
        title: str,
        back_command: Callable[[], None] | None = None,
    ) -> ttk.Frame:
        frame = ttk.Frame(parent)
        frame.pack(fill="x", pady=(0, 10))

        if back_command is not None:
            ttk.Button(frame, text="<- Back", command=back_command).pack(side="left")
        ttk.Label(frame, text=title, font=("Segoe UI", 16, "bold")).pack(side="left", padx=(10, 0))
        ttk.Label(frame, textvariable=self._dirty_indicator_var).pack(side="left", padx=(8, 0))
        return frame

    def build_status_bar(self, parent: ttk.Frame) -> ttk.Frame:
        frame = ttk.Frame(parent)
        frame.pack(fill="x", pady=(10, 0))
        ttk.Label(frame, textvariable=self.status_var).pack(side="left", anchor="w")
        return frame

    def set_status(self, text: str) -> None:
        """Set user-visible status text."""

        self.status_var.set(text)

    def track_variables(self, *variables: tk.Variable, reason: str | None = None) -> None:
        """Mark the screen dirty whenever one of these variables is written."""

        for variable in variables:
            variable.trace_add("write", lambda *_args: self.mark_dirty(reason))

    @contextmanager
    def programmatic_edit(self):
        """Suppress dirty tracking while the screen fills or resets its own fields."""

        self._dirty_suspended += 1
        try:
            yield
        finally:
            self._dirty_suspended -= 1

    @property
    def is_dirty(self) -> bool:
        """True when unsaved screen changes exist."""

        return self._dirty

    def mark_dirty(self, reason: str | None = None) -> None:
        if self._dirty_suspended:
            return
        self._dirty = True
        text = "Unsaved changes"
        if reason:
            text = f"Unsaved: {reason}"
        self._dirty_indicator_var.set(f"[{text}]")

    def mark_clean(self) -> None:
        """Mark this screen as clean after save/load."""

        self._dirty = False
        self._dirty_indicator_var.set("")

    def can_deactivate(self) -> bool:
        return not self._dirty

    def discard_changes(self) -> None:
        """Called when the user chose to leave without saving."""

        self.mark_clean()
