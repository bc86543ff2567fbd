"""Form construction helpers for consistent labeled input rows."""

from functools import partial
import tkinter as tk
from tkinter import ttk

__all__ = ["FormBuilder"]


class FormBuilder:
    """
    Consistent label+control form rows on a grid.

    - Column 0: labels
    - Column 1: controls (stretch)

    When ``screen`` is given, every bound variable is tracked so edits mark
    the screen dirty.
    """

    def __init__(self, container: ttk.Frame, *, screen: object | None = None) -> None:
        self.container = container
        self.screen = screen
        self._row = 0

        self.container.columnconfigure(0, weight=0)
        self.container.columnconfigure(1, weight=1)

    def add_entry(
        self,
        label: str,
        textvariable: tk.StringVar,
        width: int | None = None,
    ) -> ttk.Entry:
        entry = ttk.Entry(self.container, textvariable=textvariable, width=width)
        self._add_labeled_control(label, entry, variable=textvariable)
        return entry

    def add_combo(
        self,
        label: str,
        textvariable: tk.StringVar,
        values: list[str] | tuple[str, ...],
        readonly: bool = True,
    ) -> ttk.Combobox:
        state = "readonly" if readonly else "normal"
        combo = ttk.Combobox(self.container, textvariable=textvariable, values=list(values), state=state)
        self._add_labeled_control(label, combo, variable=textvariable)
        return combo

    def add_spin(
        self,
        label: str,
        textvariable: tk.StringVar,
        *,
        from_: float,
        to: float,
        increment: float = 1.0,
        width: int = 10,
    ) -> ttk.Spinbox:
        """Add a numeric Spinbox row (value kept as text for validation later)."""

        spin = ttk.Spinbox(
            self.container,
            textvariable=textvariable,
            from_=from_,
            to=to,
            increment=increment,
            width=width,
        )
        self._add_labeled_control(label, spin, variable=textvariable, sticky="w")
        return spin

    def add_text(
        self,
        label: str,
        variable: tk.StringVar,
        *,
        height: int = 3,
    ) -> tk.Text:
        """Add a multi-line Text row kept in sync with a StringVar."""

        text = tk.Text(self.container, height=height, wrap="word")
        text.insert("1.0", variable.get())
        text.bind(
            "<KeyRelease>",
            partial(self._copy_text_to_variable, widget=text, variable=variable),
        )
        self._add_labeled_control(label, text, variable=variable, sticky="nsew")
        return text

    def _add_labeled_control(
        self,
        label: str,
        widget: tk.Widget,
        *,
        variable: tk.Variable,
        sticky: str = "ew",
    ) -> None:
        row = self._row
        ttk.Label(self.container, text=f"{label}:").grid(row=row, column=0, sticky="w", padx=(0, 8), pady=4)
        widget.grid(row=row, column=1, sticky=sticky, pady=4)
        self._row += 1

        track = getattr(self.screen, "track_variables", None)
        if callable(track):
            track(variable, reason=label.lower())

    @staticmethod
    def _copy_text_to_variable(_event, *, widget: tk.Text, variable: tk.StringVar) -> None:
        current = widget.get("1.0", "end-1c")
        if current != variable.get():
            variable.set(current)
