"""Actionable error messages and the adapters that show them to the user.

Every user-facing error reads ``"<Context> / <location>: <issue>. Fix: <hint>."``
so the user always learns where the problem is and what to do about it.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable

__all__ = [
    "ACTIONABLE_ERROR_PATTERN",
    "ErrorSurface",
    "coerce_actionable_message",
    "format_actionable_error",
    "is_actionable_message",
    "show_error_dialog",
    "show_warning_dialog",
]

ACTIONABLE_ERROR_PATTERN = re.compile(r"^[^:\n]+: .+\. Fix: .+\.$")

_MODES = {"dialog", "status", "inline", "mixed"}


def _clean(value: object, default: str) -> str:
    text = str(value).strip().rstrip(".")
    return text if text else default


def format_actionable_error(context: str, location: str, issue: str, hint: str) -> str:
    clean_context = str(context).strip()
    clean_location = _clean(location, "Unknown")
    clean_issue = _clean(issue, "unknown issue")
    clean_hint = _clean(hint, "review input and retry")
    if clean_context:
        return f"{clean_context} / {clean_location}: {clean_issue}. Fix: {clean_hint}."
    return f"{clean_location}: {clean_issue}. Fix: {clean_hint}."


def is_actionable_message(message: object) -> bool:
    return bool(ACTIONABLE_ERROR_PATTERN.match(str(message).strip()))


def coerce_actionable_message(context: str, raw: object, *, location: str, hint: str) -> str:
    # KeyError wraps its message in quotes.
    text = str(raw.args[0]) if isinstance(raw, KeyError) and raw.args else str(raw)
    text = text.strip()
    if is_actionable_message(text):
        return text
    return format_actionable_error(context, location, text or "unknown issue", hint)


def show_error_dialog(title: str, message: str) -> None:
    from tkinter import messagebox

    messagebox.showerror(title, message)


def show_warning_dialog(title: str, message: str) -> None:
    from tkinter import messagebox

    messagebox.showwarning(title, message)


@dataclass
class ErrorSurface:
    """Delivers one message to a dialog, the status line, and/or an inline label."""

    context: str
    dialog_title: str
    warning_title: str | None = None
    show_dialog: Callable[[str, str], None] | None = show_error_dialog
    show_warning: Callable[[str, str], None] | None = show_warning_dialog
    set_status: Callable[[str], None] | None = None
    set_inline: Callable[[str], None] | None = None

    def clear_inline(self) -> None:
        if self.set_inline is not None:
            self.set_inline("")

    def _emit(self, message: str, *, mode: str, warning: bool) -> str:
        clean_mode = str(mode).strip().lower()
        if clean_mode not in _MODES:
            clean_mode = "mixed"
        if clean_mode in {"mixed", "dialog"}:
            if warning and self.show_warning is not None:
                self.show_warning(self.warning_title or self.dialog_title, message)
            elif self.show_dialog is not None:
                self.show_dialog(self.dialog_title, message)
        if clean_mode in {"mixed", "status"} and self.set_status is not None:
            self.set_status(message)
        if clean_mode in {"mixed", "inline"} and self.set_inline is not None:
            self.set_inline(message)
        return message

    def emit(self, *, location: str, issue: str, hint: str, mode: str = "mixed") -> str:
        message = format_actionable_error(self.context, location, issue, hint)
        return self._emit(message, mode=mode, warning=False)

    def emit_warning(self, *, location: str, issue: str, hint: str, mode: str = "mixed") -> str:
        message = format_actionable_error(self.context, location, issue, hint)
        return self._emit(message, mode=mode, warning=True)

    def emit_exception(self, exc: Exception | str, *, location: str, hint: str, mode: str = "mixed") -> str:
        message = coerce_actionable_message(self.context, exc, location=location, hint=hint)
        return self._emit(message, mode=mode, warning=False)
