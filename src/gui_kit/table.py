"""Read-only Treeview table for distance history rows."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
import tkinter as tk
from tkinter import ttk

from src.maritime_calculator import format_coords
from src.models import DistanceRecord

__all__ = ["HISTORY_COLUMNS", "HistoryTable", "estimate_column_widths", "history_row", "time_ago"]

HISTORY_COLUMNS: tuple[tuple[str, str], ...] = (
    ("ship_name", "Ship"),
    ("calculated_at", "Calculated"),
    ("time_ago", "Age"),
    ("coords", "Position"),
    ("dist_to_scattery", "Dist to Scattery (nm)"),
    ("speed", "Speed (kn)"),
    ("eta_scattery", "ETA Scattery"),
    ("user", "User"),
)


def time_ago(moment: datetime, *, now: datetime | None = None) -> str:
    current = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.astimezone()
    seconds = int((current - moment).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} min ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} h ago"
    return f"{hours // 24} d ago"


def _local(moment: datetime) -> str:
    return moment.astimezone().strftime("%d %b %H:%M")


def history_row(record: DistanceRecord, *, now: datetime | None = None) -> list[object]:
    return [
        record.ship_name,
        _local(record.calculated_at),
        time_ago(record.calculated_at, now=now),
        format_coords(record.position),
        f"{record.dist_to_scattery:.1f}",
        f"{record.speed:g}",
        _local(record.eta_scattery),
        record.user,
    ]


def estimate_column_widths(
    headings: Sequence[str],
    rows: Sequence[Sequence[object]],
    *,
    min_px: int = 70,
    max_px: int = 260,
    pad_px: int = 20,
    char_px: int = 7,
) -> list[int]:
    widths: list[int] = []
    for idx, heading in enumerate(headings):
        longest = len(heading)
        for row in rows:
            if idx < len(row):
                longest = max(longest, len(str(row[idx])))
        widths.append(max(min_px, min(max_px, longest * char_px + pad_px)))
    return widths


class HistoryTable(ttk.Frame):
    """Treeview with a vertical scrollbar, newest record on top."""

    def __init__(self, parent: tk.Widget, *, height: int = 8) -> None:
        super().__init__(parent)
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        keys = [key for key, _ in HISTORY_COLUMNS]
        self.tree = ttk.Treeview(self, columns=keys, show="headings", height=height)
        for key, heading in HISTORY_COLUMNS:
            self.tree.heading(key, text=heading)
            self.tree.column(key, width=110, anchor="w", stretch=True)
        v_scroll = ttk.Scrollbar(self, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=v_scroll.set)
        self.tree.grid(row=0, column=0, sticky="nsew")
        v_scroll.grid(row=0, column=1, sticky="ns")

        self.empty_var = tk.StringVar(value="No calculations saved recently.")
        ttk.Label(self, textvariable=self.empty_var).grid(row=1, column=0, sticky="w", pady=(4, 0))

    def set_records(self, records: Sequence[DistanceRecord], *, now: datetime | None = None) -> None:
        rows = [history_row(record, now=now) for record in records]
        for item in self.tree.get_children():
            self.tree.delete(item)
        for values in rows:
            self.tree.insert("", tk.END, values=values)

        headings = [heading for _, heading in HISTORY_COLUMNS]
        for (key, _), width in zip(HISTORY_COLUMNS, estimate_column_widths(headings, rows)):
            self.tree.column(key, width=width)
        self.empty_var.set("" if rows else "No calculations saved recently.")

    def row_count(self) -> int:
        return len(self.tree.get_children())
