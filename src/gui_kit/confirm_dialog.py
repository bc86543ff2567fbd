"""Modal yes/no confirmation that reports its answer through a future."""

from __future__ import annotations

from concurrent.futures import Future
import logging
import tkinter as tk
from tkinter import ttk

from src.navigation.deactivation_guard import ConfirmDialogOptions

logger = logging.getLogger("confirm_dialog")

__all__ = ["ConfirmDialog", "TkConfirmDialogService"]


class ConfirmDialog(tk.Toplevel):
    """
    Confirmation window with exactly two buttons.

    Confirm resolves True, cancel resolves False, Escape resolves None (an
    explicit cancel without a choice). Clicking outside the window or the
    title-bar close button does nothing while the dialog is modal. If the
    window is destroyed some other way the answer is None.
    """

    def __init__(self, parent: tk.Misc, options: ConfirmDialogOptions) -> None:
        super().__init__(parent)
        self.options = options
        self.result: Future = Future()
        self._closing = False

        self.title(options.title)
        self.resizable(False, False)
        self.transient(parent.winfo_toplevel())
        self.protocol("WM_DELETE_WINDOW", self._on_window_close)

        body = ttk.Frame(self, padding=16)
        body.pack(fill="both", expand=True)
        ttk.Label(body, text=options.title, font=("Segoe UI", 12, "bold")).pack(anchor="w")
        ttk.Label(body, text=options.message, wraplength=360, justify="left").pack(anchor="w", pady=(8, 16))

        actions = ttk.Frame(body)
        actions.pack(fill="x")
        self.confirm_button = ttk.Button(actions, text=options.confirm_text, command=lambda: self.close(True))
        self.confirm_button.pack(side="right")
        self.cancel_button = ttk.Button(actions, text=options.cancel_text, command=lambda: self.close(False))
        self.cancel_button.pack(side="right", padx=(0, 8))

        self.bind("<Escape>", lambda _event: self.close(None))
        self.bind("<Destroy>", self._on_destroy, add="+")

        if options.modal:
            self._grab_input()
        self.cancel_button.focus_set()

    def _grab_input(self, attempts_left: int = 20) -> None:
        # grab_set() fails until the window is mapped.
        if self._closing:
            return
        try:
            self.grab_set()
        except tk.TclError:
            if attempts_left > 0:
                self.after(50, lambda: self._grab_input(attempts_left - 1))

    def _on_window_close(self) -> None:
        if not self.options.modal:
            self.close(None)

    def _on_destroy(self, event: tk.Event) -> None:
        # <Destroy> on a Toplevel also fires for each child widget.
        if str(event.widget) != str(self) or self._closing:
            return
        self._closing = True
        logger.debug("Confirmation '%s' destroyed without an answer", self.options.title)
        self.result.set_result(None)

    def close(self, choice: bool | None) -> None:
        if self._closing or self.result.done():
            return
        self._closing = True
        logger.debug("Confirmation '%s' closed with %r", self.options.title, choice)
        try:
            self.grab_release()
        except tk.TclError:
            pass
        self.destroy()
        self.result.set_result(choice)


class TkConfirmDialogService:
    """Opens ConfirmDialog windows over a parent widget; one future per dialog."""

    def __init__(self, parent: tk.Misc) -> None:
        self.parent = parent
        self.open_dialogs: list[ConfirmDialog] = []

    def open(self, options: ConfirmDialogOptions) -> Future:
        dialog = ConfirmDialog(self.parent, options)
        self.open_dialogs.append(dialog)
        dialog.result.add_done_callback(lambda _done: self._forget(dialog))
        return dialog.result

    def _forget(self, dialog: ConfirmDialog) -> None:
        if dialog in self.open_dialogs:
            self.open_dialogs.remove(dialog)
