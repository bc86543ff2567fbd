"""Records stored for ships, visits, trips and distance calculations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

PORTS: tuple[str, ...] = (
    "Anchorage",
    "Cappa",
    "Moneypoint",
    "Tarbert",
    "Foynes",
    "Aughinish",
    "Shannon",
    "Limerick",
)

VISIT_STATUSES: tuple[str, ...] = ("Due", "Awaiting Berth", "Alongside", "Sailed", "Cancelled")

SOURCES: tuple[str, ...] = ("Sheet", "AIS", "Good Guess", "Agent", "Pilot", "Other")

TRIP_TYPES: tuple[str, ...] = ("In", "Out", "Anchorage", "Shift", "BerthToBerth", "Other")


@dataclass
class Ship:
    ship_id: str
    ship_name: str
    gross_tonnage: int
    imo_number: int | None = None
    marine_traffic_link: str | None = None
    ship_notes: str | None = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Visit:
    visit_id: str
    ship_id: str
    ship_name: str
    gross_tonnage: int
    current_status: str
    initial_eta: str
    berth_port: str | None
    visit_notes: str | None
    source: str
    status_last_updated: str = ""
    updated_by: str = ""


@dataclass
class Trip:
    trip_id: str
    visit_id: str
    ship_id: str
    type_trip: str
    boarding: str | None
    pilot: str
    port: str | None
    ship_name: str
    gt: int
    pilot_notes: str = ""
    extra_charges_notes: str = ""
    is_confirmed: bool = False
    recorded_by: str = ""
    recorded_at: str = ""


@dataclass
class DistanceRecord:
    """One saved distance/ETA calculation shown in the history table."""

    ship_name: str
    position: dict[str, float]
    calculated_at: datetime
    next_waypoint: dict[str, object]
    dist_to_scattery: float
    speed: float
    eta_kilcredaun: datetime
    eta_scattery: datetime
    user: str
    record_id: str | None = None
    timestamp: str | None = None


@dataclass
class NewVisitData:
    """Form input bundle for registering a new port visit.

    Produces a ship (found or created), a visit in status ``Due`` and the
    inbound trip with no boarding time yet.
    """

    ship_name: str
    gross_tonnage: int
    initial_eta: datetime
    source: str
    imo_number: int | None = None
    marine_traffic_link: str | None = None
    ship_notes: str | None = None
    berth_port: str | None = None
    visit_notes: str | None = None
    pilot: str | None = None


def _visit_error(field: str, issue: str, hint: str) -> str:
    return f"New Visit / {field}: {issue}. Fix: {hint}."


def _fail(field: str, issue: str, hint: str) -> None:
    raise ValueError(_visit_error(field, issue, hint))


def validate_new_visit(data: NewVisitData) -> None:
    if not str(data.ship_name or "").strip():
        _fail("Ship name", "ship name is required", "enter the vessel name")
    if not isinstance(data.gross_tonnage, int) or isinstance(data.gross_tonnage, bool) or data.gross_tonnage <= 0:
        _fail("Gross tonnage", f"gross tonnage must be a positive whole number, got {data.gross_tonnage!r}", "enter the GT from the ship particulars")
    if data.imo_number is not None and (not isinstance(data.imo_number, int) or data.imo_number <= 0):
        _fail("IMO number", f"IMO number must be a positive number, got {data.imo_number!r}", "enter the 7-digit IMO number or leave it blank")
    if not isinstance(data.initial_eta, datetime):
        _fail("ETA", "ETA must be a date and time", "pick the expected arrival time")
    if data.berth_port is not None and data.berth_port not in PORTS:
        _fail("Berth port", f"unknown port '{data.berth_port}'", f"choose one of: {', '.join(PORTS)}")
    if data.source not in SOURCES:
        _fail("Source", f"unknown source '{data.source}'", f"choose one of: {', '.join(SOURCES)}")
