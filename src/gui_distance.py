from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk

from src.config import AppConfig
from src.gui_kit.error_surface import ErrorSurface
from src.gui_kit.feedback import ToastCenter
from src.gui_kit.forms import FormBuilder
from src.gui_kit.layout import BaseScreen
from src.gui_kit.table import HistoryTable
from src.maritime_calculator import (
    WAYPOINTS,
    CalculationResult,
    ShipPosition,
    calculate,
    calculate_with_waypoint,
    parse_coordinates,
)
from src.models import DistanceRecord
from src.storage_sqlite_port import DistanceRepository

logger = logging.getLogger("gui_distance")

AUTO_WAYPOINT = "Auto (nearest)"


class DistanceScreen(BaseScreen):
    """Distance/ETA to the Shannon estuary plus the recent calculation history.

    Only the ship name counts as unsaved input: position fields are scratch
    values that recalculate live.
    """

    def __init__(self, parent: tk.Widget, app: object, cfg: AppConfig, repository: DistanceRepository) -> None:
        super().__init__(parent)
        self.app = app
        self.cfg = cfg
        self.repository = repository
        self.last_result: CalculationResult | None = None

        start = ShipPosition(speed=cfg.default_speed_knots)
        self.position_vars: dict[str, tk.StringVar] = {
            key: tk.StringVar(value=f"{value:g}") for key, value in start.as_dict().items()
        }
        self.waypoint_var = tk.StringVar(value=AUTO_WAYPOINT)
        self.paste_var = tk.StringVar(value="")
        self.ship_name_var = tk.StringVar(value="")

        self.result_vars: dict[str, tk.StringVar] = {
            key: tk.StringVar(value="-")
            for key in ("next_waypoint", "dist_to_waypoint", "dist_to_kilcredaun", "dist_to_scattery", "eta_kilcredaun", "eta_scattery")
        }
        self.build()
        self.recalculate()
        self.refresh_history()

    def build(self) -> None:
        outer = ttk.Frame(self, padding=16)
        outer.pack(fill="both", expand=True)
        self.build_header(outer, title="Distance to Shannon", back_command=lambda: self.app.navigate("home"))

        top = ttk.Frame(outer)
        top.pack(fill="x")

        position_box = ttk.LabelFrame(top, text="Position report", padding=10)
        position_box.pack(side="left", fill="both", expand=True)
        form = FormBuilder(position_box)
        form.add_spin("Latitude (deg N)", self.position_vars["lat"], from_=49, to=56)
        form.add_spin("Latitude (min)", self.position_vars["latmin"], from_=0, to=59.99, increment=0.5)
        form.add_spin("Longitude (deg W)", self.position_vars["long"], from_=0, to=12)
        form.add_spin("Longitude (min)", self.position_vars["longmin"], from_=0, to=59.99, increment=0.5)
        form.add_spin("Speed (kn)", self.position_vars["speed"], from_=0.5, to=30, increment=0.5)
        form.add_spin("Report delay (h)", self.position_vars["delay_hrs"], from_=0, to=48)
        form.add_spin("Report delay (min)", self.position_vars["delay_mns"], from_=0, to=59)
        form.add_combo("Route via", self.waypoint_var, (AUTO_WAYPOINT,) + tuple(wp.name for wp in WAYPOINTS))
        paste_entry = form.add_entry("Paste 'lat, long'", self.paste_var)
        paste_entry.bind("<Return>", lambda _event: self.apply_pasted_coordinates(self.paste_var.get()))

        for variable in list(self.position_vars.values()) + [self.waypoint_var]:
            variable.trace_add("write", lambda *_args: self.recalculate())

        results_box = ttk.LabelFrame(top, text="Results", padding=10)
        results_box.pack(side="left", fill="both", expand=True, padx=(10, 0))
        labels = (
            ("next_waypoint", "Next waypoint"),
            ("dist_to_waypoint", "Distance to waypoint"),
            ("dist_to_kilcredaun", "Distance to Kilcredaun"),
            ("dist_to_scattery", "Distance to Scattery"),
            ("eta_kilcredaun", "ETA Kilcredaun"),
            ("eta_scattery", "ETA Scattery"),
        )
        for row, (key, text) in enumerate(labels):
            ttk.Label(results_box, text=f"{text}:").grid(row=row, column=0, sticky="w", pady=2)
            ttk.Label(results_box, textvariable=self.result_vars[key]).grid(row=row, column=1, sticky="w", padx=(8, 0))

        save_row = ttk.Frame(outer)
        save_row.pack(fill="x", pady=(10, 0))
        save_form = FormBuilder(save_row, screen=self)
        save_form.add_entry("Ship name", self.ship_name_var, width=30)
        ttk.Button(save_row, text="Save calculation", command=self.save_calculation).grid(row=0, column=2, padx=(8, 0))

        self.history = HistoryTable(outer)
        self.history.pack(fill="both", expand=True, pady=(10, 0))

        self.build_status_bar(outer)
        self.toasts = ToastCenter(self)
        self.error_surface = ErrorSurface(
            context="Distance to Shannon",
            dialog_title="Distance calculation error",
            warning_title="Distance calculation warning",
            set_status=self.set_status,
        )

    def read_position(self) -> ShipPosition:
        values: dict[str, float] = {}
        for key, variable in self.position_vars.items():
            text = variable.get().strip() or "0"
            try:
                values[key] = float(text)
            except ValueError as exc:
                raise ValueError(
                    f"Distance to Shannon / {key}: '{text}' is not a number. Fix: enter a numeric value."
                ) from exc
        return ShipPosition(**values)

    def recalculate(self) -> CalculationResult | None:
        try:
            position = self.read_position()
            choice = self.waypoint_var.get()
            waypoint = next((wp for wp in WAYPOINTS if wp.name == choice), None)
            if waypoint is None:
                result = calculate(position)
            else:
                result = calculate_with_waypoint(position, waypoint)
        except ValueError as exc:
            self.last_result = None
            for variable in self.result_vars.values():
                variable.set("-")
            self.error_surface.emit_exception(exc, location="Position", hint="check the position fields", mode="status")
            return None

        self.last_result = result
        self.result_vars["next_waypoint"].set(result.next_waypoint.name)
        self.result_vars["dist_to_waypoint"].set(f"{result.dist_to_waypoint:.1f} nm")
        self.result_vars["dist_to_kilcredaun"].set(f"{result.dist_to_kilcredaun:.1f} nm")
        self.result_vars["dist_to_scattery"].set(f"{result.dist_to_scattery:.1f} nm")
        self.result_vars["eta_kilcredaun"].set(result.eta_kilcredaun.strftime("%d %b %H:%M"))
        self.result_vars["eta_scattery"].set(result.eta_scattery.strftime("%d %b %H:%M"))
        self.set_status(f"Routing via {result.next_waypoint.name}, {result.hours_to_kilcredaun:.1f} h to Kilcredaun.")
        return result

    def apply_pasted_coordinates(self, text: str) -> bool:
        try:
            speed = float(self.position_vars["speed"].get() or self.cfg.default_speed_knots)
        except ValueError:
            speed = self.cfg.default_speed_knots
        try:
            position = parse_coordinates(text, speed=speed)
        except ValueError as exc:
            self.error_surface.emit_exception(exc, location="Coordinates", hint="paste decimal degrees such as 52.5, -9.8", mode="status")
            return False
        for key in ("lat", "latmin", "long", "longmin"):
            self.position_vars[key].set(f"{getattr(position, key):.4g}")
        return True

    def save_calculation(self) -> str | None:
        ship_name = self.ship_name_var.get().strip()
        if not ship_name:
            self.error_surface.emit_warning(
                location="Ship name",
                issue="a ship name is required to save",
                hint="enter the vessel name",
                mode="status",
            )
            return None
        result = self.recalculate()
        if result is None:
            return None

        position = self.read_position()
        record = DistanceRecord(
            ship_name=ship_name,
            position=position.as_dict(),
            calculated_at=result.from_time,
            next_waypoint={
                "name": result.next_waypoint.name,
                "lat": result.next_waypoint.lat,
                "long": result.next_waypoint.long,
                "dist": result.next_waypoint.dist,
            },
            dist_to_scattery=result.dist_to_scattery,
            speed=position.speed,
            eta_kilcredaun=result.eta_kilcredaun,
            eta_scattery=result.eta_scattery,
            user=self.cfg.recorded_by,
        )
        record_id = self.repository.append(record)
        with self.programmatic_edit():
            self.ship_name_var.set("")
        self.mark_clean()
        self.refresh_history()
        self.toasts.show_toast(f"Calculation saved for {ship_name}.", level="success")
        return record_id

    def refresh_history(self) -> None:
        records = self.repository.get_history(self.cfg.history_days)[: self.cfg.history_limit]
        self.history.set_records(records)

    def discard_changes(self) -> None:
        with self.programmatic_edit():
            self.ship_name_var.set("")
        self.mark_clean()
