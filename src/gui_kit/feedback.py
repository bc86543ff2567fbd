"""Non-blocking feedback helpers for Tkinter screens."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

__all__ = ["ToastCenter"]


_TOAST_COLORS: dict[str, str] = {
    "info": "#d9ecff",
    "success": "#dff5e1",
    "warn": "#fff4cf",
    "error": "#ffd9d9",
}


class ToastCenter(ttk.Frame):
    """Short-lived notices stacked in the top-right corner of a screen."""

    def __init__(self, parent: tk.Widget, *, duration_ms: int = 2500, max_toasts: int = 3) -> None:
        super().__init__(parent)
        self.duration_ms = max(250, int(duration_ms))
        self.max_toasts = max(1, int(max_toasts))
        self.messages: list[str] = []
        self._cards: list[tk.Label] = []
        self.place(in_=parent, relx=1.0, x=-12, y=12, anchor="ne")

    def show_toast(self, message: str, *, level: str = "info") -> None:
        text = message.strip()
        if not text:
            return

        color = _TOAST_COLORS.get(level, _TOAST_COLORS["info"])
        card = tk.Label(self, text=text, bg=color, anchor="w", justify="left", wraplength=320, padx=8, pady=6)
        card.pack(fill="x", pady=(0, 6))
        self._cards.append(card)
        self.messages.append(text)
        while len(self._cards) > self.max_toasts:
            self.dismiss(self._cards[0])
        self.after(self.duration_ms, lambda c=card: self.dismiss(c))

    def dismiss(self, card: tk.Label) -> None:
        if card not in self._cards:
            return
        self._cards.remove(card)
        try:
            card.destroy()
        except tk.TclError:
            return
