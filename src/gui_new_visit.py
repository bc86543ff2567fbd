from __future__ import annotations

from datetime import datetime
import logging
import tkinter as tk
from tkinter import ttk

from src.config import AppConfig
from src.gui_kit.error_surface import ErrorSurface, format_actionable_error
from src.gui_kit.feedback import ToastCenter
from src.gui_kit.forms import FormBuilder
from src.gui_kit.layout import BaseScreen
from src.models import PORTS, SOURCES, NewVisitData
from src.visit_workflow import VisitWorkflow

logger = logging.getLogger("gui_new_visit")

ETA_FORMAT = "%Y-%m-%d %H:%M"


def _form_error(field: str, issue: str, hint: str) -> ValueError:
    return ValueError(format_actionable_error("New Visit", field, issue, hint))


def _optional_text(value: str) -> str | None:
    text = value.strip()
    return text or None


def _parse_int(value: str, *, field: str, required: bool) -> int | None:
    text = value.strip().replace(",", "")
    if not text:
        if required:
            raise _form_error(field, "value is required", "enter a whole number")
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise _form_error(field, f"'{value.strip()}' is not a whole number", "enter digits only") from exc


def _parse_eta(value: str) -> datetime:
    try:
        return datetime.strptime(value.strip(), ETA_FORMAT)
    except ValueError as exc:
        raise _form_error("ETA", f"'{value.strip()}' is not a date and time", "use YYYY-MM-DD HH:MM") from exc


class NewVisitScreen(BaseScreen):
    """Form for registering a vessel's upcoming port visit."""

    def __init__(self, parent: tk.Widget, app: object, cfg: AppConfig, workflow: VisitWorkflow) -> None:
        super().__init__(parent)
        self.app = app
        self.cfg = cfg
        self.workflow = workflow
        self.last_visit_id: str | None = None

        self.ship_name_var = tk.StringVar(value="")
        self.gross_tonnage_var = tk.StringVar(value="")
        self.imo_number_var = tk.StringVar(value="")
        self.marine_traffic_var = tk.StringVar(value="")
        self.ship_notes_var = tk.StringVar(value="")
        self.eta_var = tk.StringVar(value="")
        self.berth_port_var = tk.StringVar(value="")
        self.visit_notes_var = tk.StringVar(value="")
        self.source_var = tk.StringVar(value=SOURCES[0])
        self.pilot_var = tk.StringVar(value="")
        self.force_new_ship_var = tk.BooleanVar(value=False)
        self.inline_error_var = tk.StringVar(value="")

        self.build()

    def build(self) -> None:
        outer = ttk.Frame(self, padding=16)
        outer.pack(fill="both", expand=True)
        self.build_header(outer, title="New Visit", back_command=lambda: self.app.navigate("home"))

        ship_box = ttk.LabelFrame(outer, text="Ship", padding=10)
        ship_box.pack(fill="x")
        ship_form = FormBuilder(ship_box, screen=self)
        ship_form.add_entry("Ship name", self.ship_name_var)
        ship_form.add_entry("Gross tonnage", self.gross_tonnage_var, width=12)
        ship_form.add_entry("IMO number", self.imo_number_var, width=12)
        ship_form.add_entry("MarineTraffic link", self.marine_traffic_var)
        self.ship_notes_text = ship_form.add_text("Ship notes", self.ship_notes_var, height=2)

        visit_box = ttk.LabelFrame(outer, text="Visit", padding=10)
        visit_box.pack(fill="x", pady=(10, 0))
        visit_form = FormBuilder(visit_box, screen=self)
        visit_form.add_entry("ETA (YYYY-MM-DD HH:MM)", self.eta_var, width=18)
        visit_form.add_combo("Berth port", self.berth_port_var, ("",) + PORTS)
        visit_form.add_combo("Source", self.source_var, SOURCES)
        visit_form.add_entry("Inbound pilot", self.pilot_var)
        self.visit_notes_text = visit_form.add_text("Visit notes", self.visit_notes_var, height=2)

        ttk.Checkbutton(
            outer,
            text="Create a separate ship record even if the name already exists",
            variable=self.force_new_ship_var,
        ).pack(anchor="w", pady=(8, 0))
        ttk.Label(outer, textvariable=self.inline_error_var, foreground="#b00020", wraplength=640).pack(
            anchor="w", pady=(6, 0)
        )

        actions = ttk.Frame(outer)
        actions.pack(fill="x", pady=(8, 0))
        ttk.Button(actions, text="Create visit", command=self.save).pack(side="right")
        ttk.Button(actions, text="Clear form", command=self.reset_form).pack(side="right", padx=(0, 8))

        self.build_status_bar(outer)
        self.toasts = ToastCenter(self)
        self.error_surface = ErrorSurface(
            context="New Visit",
            dialog_title="New visit error",
            warning_title="New visit warning",
            set_status=self.set_status,
            set_inline=self.inline_error_var.set,
        )

    def collect_form(self) -> NewVisitData:
        return NewVisitData(
            ship_name=self.ship_name_var.get().strip(),
            gross_tonnage=_parse_int(self.gross_tonnage_var.get(), field="Gross tonnage", required=True),
            initial_eta=_parse_eta(self.eta_var.get()),
            source=self.source_var.get().strip(),
            imo_number=_parse_int(self.imo_number_var.get(), field="IMO number", required=False),
            marine_traffic_link=_optional_text(self.marine_traffic_var.get()),
            ship_notes=_optional_text(self.ship_notes_var.get()),
            berth_port=_optional_text(self.berth_port_var.get()),
            visit_notes=_optional_text(self.visit_notes_var.get()),
            pilot=_optional_text(self.pilot_var.get()),
        )

    def save(self) -> str | None:
        self.error_surface.clear_inline()
        try:
            data = self.collect_form()
            visit_id = self.workflow.create_new_visit(data, force_new_ship=bool(self.force_new_ship_var.get()))
        except ValueError as exc:
            self.error_surface.emit_exception(exc, location="Form", hint="correct the highlighted field", mode="inline")
            self.set_status("Visit not created.")
            return None

        self.last_visit_id = visit_id
        self.reset_form()
        self.set_status(f"Visit created for {data.ship_name} (status Due).")
        self.toasts.show_toast(f"Visit created for {data.ship_name}.", level="success")
        logger.info("New visit %s saved from form", visit_id)
        return visit_id

    def reset_form(self) -> None:
        with self.programmatic_edit():
            for variable in (
                self.ship_name_var,
                self.gross_tonnage_var,
                self.imo_number_var,
                self.marine_traffic_var,
                self.ship_notes_var,
                self.eta_var,
                self.berth_port_var,
                self.visit_notes_var,
                self.pilot_var,
            ):
                variable.set("")
            self.source_var.set(SOURCES[0])
            self.force_new_ship_var.set(False)
            self.ship_notes_text.delete("1.0", tk.END)
            self.visit_notes_text.delete("1.0", tk.END)
        self.error_surface.clear_inline()
        self.mark_clean()

    def discard_changes(self) -> None:
        self.reset_form()
