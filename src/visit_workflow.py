from __future__ import annotations

import logging
from dataclasses import dataclass

from src.models import PORTS, NewVisitData, Trip, Visit, validate_new_visit
from src.storage_sqlite_port import ShipRepository, TripRepository, VisitRepository, format_timestamp

logger = logging.getLogger("visit_workflow")

WARNING_NONE = "NONE"
WARNING_ACTIVE_DATA = "ACTIVE_DATA"


@dataclass(frozen=True)
class CancelVisitResult:
    deleted_trips: int
    warning_level: str


class VisitWorkflow:
    """Multi-record visit operations: creation, arrival, shifts, sailing, cancel."""

    def __init__(
        self,
        *,
        ships: ShipRepository,
        visits: VisitRepository,
        trips: TripRepository,
        recorded_by: str = "Unknown",
    ) -> None:
        self.ships = ships
        self.visits = visits
        self.trips = trips
        self.recorded_by = recorded_by.strip() or "Unknown"

    @classmethod
    def for_database(cls, db_path: str, *, recorded_by: str = "Unknown") -> "VisitWorkflow":
        trips = TripRepository(db_path)
        return cls(
            ships=ShipRepository(db_path, trips=trips),
            visits=VisitRepository(db_path),
            trips=trips,
            recorded_by=recorded_by,
        )

    def create_new_visit(self, data: NewVisitData, *, force_new_ship: bool = False) -> str:
        """
        Create ship (found or forced), visit in status Due, and the inbound trip.

        The inbound trip has no boarding time yet; it is set when the pilot
        boards. Returns the new visit id.
        """

        validate_new_visit(data)
        if force_new_ship:
            ship_id = self.ships.force_create_ship(data)
        else:
            ship_id = self.ships.find_or_create_ship(data)

        ship_name = data.ship_name.strip()
        visit_id = self.visits.add_visit(
            Visit(
                visit_id="",
                ship_id=ship_id,
                ship_name=ship_name,
                gross_tonnage=data.gross_tonnage,
                current_status="Due",
                initial_eta=format_timestamp(data.initial_eta),
                berth_port=data.berth_port,
                visit_notes=data.visit_notes,
                source=data.source,
                updated_by=self.recorded_by,
            )
        )
        self.trips.add_trip(
            Trip(
                trip_id="",
                visit_id=visit_id,
                ship_id=ship_id,
                type_trip="In",
                boarding=None,
                pilot=(data.pilot or "").strip(),
                port=data.berth_port,
                ship_name=ship_name,
                gt=data.gross_tonnage,
                pilot_notes=data.visit_notes or "",
                recorded_by=self.recorded_by,
            )
        )
        logger.info("Created visit %s for '%s' (ship %s)", visit_id, ship_name, ship_id)
        return visit_id

    def arrive_ship(self, visit_id: str) -> None:
        self.visits.update_visit_status(visit_id, "Alongside", self.recorded_by)

    def shift_ship(self, visit_id: str, to_port: str, pilot: str) -> str:
        if to_port not in PORTS:
            raise ValueError(
                f"Shift ship / Port: unknown port '{to_port}'. Fix: choose one of: {', '.join(PORTS)}."
            )
        visit = self.visits.get_visit(visit_id)
        trip_id = self._add_movement(visit, "Shift", pilot, to_port)
        self.visits.update_visit_location(visit_id, to_port, self.recorded_by)
        return trip_id

    def sail_ship(self, visit_id: str, pilot: str) -> str:
        visit = self.visits.get_visit(visit_id)
        trip_id = self._add_movement(visit, "Out", pilot, visit.berth_port)
        self.visits.update_visit_status(visit_id, "Sailed", self.recorded_by)
        return trip_id

    def cancel_visit(self, visit_id: str) -> CancelVisitResult:
        trips = self.trips.get_trips_for_visit(visit_id)
        confirmed = [trip for trip in trips if trip.is_confirmed]
        if confirmed:
            raise ValueError(
                f"Cancel visit / {visit_id}: {len(confirmed)} trip(s) are already confirmed/billed. "
                "Fix: unconfirm those trips first if the visit really did not happen."
            )

        warning_level = WARNING_ACTIVE_DATA if any(trip.boarding is not None for trip in trips) else WARNING_NONE
        # Trips are kept for history.
        self.visits.update_visit_status(visit_id, "Cancelled", self.recorded_by)
        logger.info("Cancelled visit %s (warning=%s)", visit_id, warning_level)
        return CancelVisitResult(deleted_trips=0, warning_level=warning_level)

    def _add_movement(self, visit: Visit, type_trip: str, pilot: str, port: str | None) -> str:
        return self.trips.add_trip(
            Trip(
                trip_id="",
                visit_id=visit.visit_id,
                ship_id=visit.ship_id,
                type_trip=type_trip,
                boarding=self.trips.now(),
                pilot=pilot.strip(),
                port=port,
                ship_name=visit.ship_name,
                gt=visit.gross_tonnage or 0,
                recorded_by=self.recorded_by,
            )
        )
