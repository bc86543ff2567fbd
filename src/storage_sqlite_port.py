import json
import logging
import sqlite3
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from src.models import DistanceRecord, NewVisitData, Ship, Trip, Visit

logger = logging.getLogger("storage_sqlite_port")

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS ships (
    ship_id TEXT PRIMARY KEY,
    ship_name TEXT NOT NULL,
    ship_name_lowercase TEXT NOT NULL,
    gross_tonnage INTEGER NOT NULL,
    imo_number INTEGER,
    marine_traffic_link TEXT,
    ship_notes TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS ix_ships_name_lower ON ships (ship_name_lowercase);

CREATE TABLE IF NOT EXISTS visits (
    visit_id TEXT PRIMARY KEY,
    ship_id TEXT NOT NULL REFERENCES ships (ship_id),
    ship_name TEXT NOT NULL,
    gross_tonnage INTEGER NOT NULL,
    current_status TEXT NOT NULL,
    initial_eta TEXT NOT NULL,
    berth_port TEXT,
    visit_notes TEXT,
    source TEXT NOT NULL,
    status_last_updated TEXT NOT NULL,
    updated_by TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS trips (
    trip_id TEXT PRIMARY KEY,
    visit_id TEXT NOT NULL REFERENCES visits (visit_id),
    ship_id TEXT NOT NULL REFERENCES ships (ship_id),
    type_trip TEXT NOT NULL,
    boarding TEXT,
    pilot TEXT NOT NULL,
    port TEXT,
    ship_name TEXT NOT NULL,
    gt INTEGER NOT NULL,
    pilot_notes TEXT NOT NULL,
    extra_charges_notes TEXT NOT NULL,
    is_confirmed INTEGER NOT NULL,
    recorded_by TEXT NOT NULL,
    recorded_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS ix_trips_visit ON trips (visit_id);

CREATE TABLE IF NOT EXISTS distance (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    record_id TEXT NOT NULL UNIQUE,
    ship_name TEXT NOT NULL,
    position_json TEXT NOT NULL,
    calculated_at TEXT NOT NULL,
    next_waypoint_json TEXT NOT NULL,
    dist_to_scattery REAL NOT NULL,
    speed REAL NOT NULL,
    eta_kilcredaun TEXT NOT NULL,
    eta_scattery TEXT NOT NULL,
    user TEXT NOT NULL,
    timestamp TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS ix_distance_timestamp ON distance (timestamp);
"""

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    # Fixed-width UTC text so string order matches time order. Naive values are local time.
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(text: str) -> datetime:
    return datetime.strptime(text, "%Y-%m-%dT%H:%M:%S.%fZ").replace(tzinfo=timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def _not_found(kind: str, record_id: str) -> KeyError:
    return KeyError(
        f"Port visits / {kind}: no record with id '{record_id}'. "
        "Fix: refresh the list and pick an existing record."
    )


def init_port_db(db_path: str) -> None:
    with _connect(db_path) as conn:
        conn.executescript(CREATE_TABLES_SQL)
        conn.commit()
    logger.info("Initialized port visit DB at %s", db_path)


class _Repository:
    def __init__(self, db_path: str, *, clock: Clock = utc_now) -> None:
        self.db_path = db_path
        self._clock = clock

    def now(self) -> str:
        return format_timestamp(self._clock())


class TripRepository(_Repository):
    def add_trip(self, trip: Trip) -> str:
        trip_id = trip.trip_id or _new_id()
        recorded_at = trip.recorded_at or self.now()
        with _connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO trips (trip_id, visit_id, ship_id, type_trip, boarding, pilot, port,
                                   ship_name, gt, pilot_notes, extra_charges_notes, is_confirmed,
                                   recorded_by, recorded_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    trip_id,
                    trip.visit_id,
                    trip.ship_id,
                    trip.type_trip,
                    trip.boarding,
                    trip.pilot,
                    trip.port,
                    trip.ship_name,
                    trip.gt,
                    trip.pilot_notes,
                    trip.extra_charges_notes,
                    int(trip.is_confirmed),
                    trip.recorded_by,
                    recorded_at,
                ),
            )
            conn.commit()
        logger.debug("Added %s trip %s for visit %s", trip.type_trip, trip_id, trip.visit_id)
        return trip_id

    def get_trips_for_visit(self, visit_id: str) -> list[Trip]:
        with _connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM trips WHERE visit_id = ? ORDER BY recorded_at, rowid;",
                (visit_id,),
            ).fetchall()
        return [_row_to_trip(row) for row in rows]

    def update_ship_details_for_unconfirmed_trips(self, ship_id: str, ship_name: str, gt: int) -> int:
        """Copy ship name/GT onto trips not yet confirmed; confirmed trips are billing history."""

        with _connect(self.db_path) as conn:
            cur = conn.execute(
                "UPDATE trips SET ship_name = ?, gt = ? WHERE ship_id = ? AND is_confirmed = 0;",
                (ship_name, gt, ship_id),
            )
            conn.commit()
        logger.debug("Synced ship details onto %d unconfirmed trips of ship %s", cur.rowcount, ship_id)
        return cur.rowcount


class ShipRepository(_Repository):
    def __init__(self, db_path: str, *, trips: TripRepository | None = None, clock: Clock = utc_now) -> None:
        super().__init__(db_path, clock=clock)
        self.trips = trips or TripRepository(db_path, clock=clock)

    def find_or_create_ship(self, data: NewVisitData) -> str:
        name_lower = data.ship_name.strip().lower()
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT ship_id FROM ships WHERE ship_name_lowercase = ? LIMIT 1;",
                (name_lower,),
            ).fetchone()
        if row is None:
            return self.force_create_ship(data)

        ship_id = row["ship_id"]
        with _connect(self.db_path) as conn:
            conn.execute(
                """
                UPDATE ships
                SET gross_tonnage = ?, imo_number = ?, ship_name_lowercase = ?,
                    marine_traffic_link = ?, ship_notes = ?, updated_at = ?
                WHERE ship_id = ?;
                """,
                (
                    data.gross_tonnage,
                    data.imo_number,
                    name_lower,
                    data.marine_traffic_link,
                    data.ship_notes,
                    self.now(),
                    ship_id,
                ),
            )
            conn.commit()
        self.trips.update_ship_details_for_unconfirmed_trips(ship_id, data.ship_name.strip(), data.gross_tonnage)
        logger.info("Reused ship %s for '%s'", ship_id, data.ship_name)
        return ship_id

    def force_create_ship(self, data: NewVisitData) -> str:
        ship_id = _new_id()
        now = self.now()
        with _connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO ships (ship_id, ship_name, ship_name_lowercase, gross_tonnage, imo_number,
                                   marine_traffic_link, ship_notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    ship_id,
                    data.ship_name.strip(),
                    data.ship_name.strip().lower(),
                    data.gross_tonnage,
                    data.imo_number,
                    data.marine_traffic_link,
                    data.ship_notes,
                    now,
                    now,
                ),
            )
            conn.commit()
        logger.info("Created ship %s for '%s'", ship_id, data.ship_name)
        return ship_id

    def get_ship(self, ship_id: str) -> Ship:
        with _connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM ships WHERE ship_id = ?;", (ship_id,)).fetchone()
        if row is None:
            raise _not_found("Ship", ship_id)
        return Ship(
            ship_id=row["ship_id"],
            ship_name=row["ship_name"],
            gross_tonnage=row["gross_tonnage"],
            imo_number=row["imo_number"],
            marine_traffic_link=row["marine_traffic_link"],
            ship_notes=row["ship_notes"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class VisitRepository(_Repository):
    def add_visit(self, visit: Visit) -> str:
        visit_id = visit.visit_id or _new_id()
        with _connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO visits (visit_id, ship_id, ship_name, gross_tonnage, current_status,
                                    initial_eta, berth_port, visit_notes, source,
                                    status_last_updated, updated_by)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    visit_id,
                    visit.ship_id,
                    visit.ship_name,
                    visit.gross_tonnage,
                    visit.current_status,
                    visit.initial_eta,
                    visit.berth_port,
                    visit.visit_notes,
                    visit.source,
                    visit.status_last_updated or self.now(),
                    visit.updated_by,
                ),
            )
            conn.commit()
        logger.info("Added visit %s (%s, %s)", visit_id, visit.ship_name, visit.current_status)
        return visit_id

    def get_visit(self, visit_id: str) -> Visit:
        with _connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM visits WHERE visit_id = ?;", (visit_id,)).fetchone()
        if row is None:
            raise _not_found("Visit", visit_id)
        return Visit(**{key: row[key] for key in row.keys()})

    def _update(self, visit_id: str, assignments: str, params: tuple) -> None:
        with _connect(self.db_path) as conn:
            cur = conn.execute(
                f"UPDATE visits SET {assignments}, status_last_updated = ?, updated_by = ? WHERE visit_id = ?;",
                params + (visit_id,),
            )
            conn.commit()
        if cur.rowcount == 0:
            raise _not_found("Visit", visit_id)

    def update_visit_status(self, visit_id: str, status: str, updated_by: str) -> None:
        self._update(visit_id, "current_status = ?", (status, self.now(), updated_by))
        logger.info("Visit %s -> %s (by %s)", visit_id, status, updated_by)

    def update_visit_location(self, visit_id: str, port: str, updated_by: str) -> None:
        self._update(visit_id, "berth_port = ?", (port, self.now(), updated_by))
        logger.info("Visit %s moved to %s (by %s)", visit_id, port, updated_by)


class DistanceRepository(_Repository):
    """Append-only log of distance calculations, newest first on read."""

    def append(self, record: DistanceRecord) -> str:
        record_id = _new_id()
        timestamp = self.now()
        with _connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO distance (record_id, ship_name, position_json, calculated_at,
                                      next_waypoint_json, dist_to_scattery, speed,
                                      eta_kilcredaun, eta_scattery, user, timestamp)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    record_id,
                    record.ship_name,
                    json.dumps(record.position, sort_keys=True),
                    format_timestamp(record.calculated_at),
                    json.dumps(record.next_waypoint, sort_keys=True),
                    float(record.dist_to_scattery),
                    float(record.speed),
                    format_timestamp(record.eta_kilcredaun),
                    format_timestamp(record.eta_scattery),
                    record.user,
                    timestamp,
                ),
            )
            conn.commit()
        logger.info("Saved distance calculation %s for '%s'", record_id, record.ship_name)
        return record_id

    def query_recent(self, limit: int) -> list[DistanceRecord]:
        if int(limit) <= 0:
            raise ValueError(
                f"Distance history / limit: limit must be > 0, got {limit}. "
                "Fix: request at least one record."
            )
        with _connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM distance ORDER BY timestamp DESC, seq DESC LIMIT ?;",
                (int(limit),),
            ).fetchall()
        return [_row_to_distance(row) for row in rows]

    def get_history(self, days: int = 7) -> list[DistanceRecord]:
        cutoff = format_timestamp(self._clock() - timedelta(days=days))
        with _connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM distance WHERE timestamp >= ? ORDER BY timestamp DESC, seq DESC;",
                (cutoff,),
            ).fetchall()
        return [_row_to_distance(row) for row in rows]


def _row_to_trip(row: sqlite3.Row) -> Trip:
    values = {key: row[key] for key in row.keys()}
    values["is_confirmed"] = bool(values["is_confirmed"])
    return Trip(**values)


def _row_to_distance(row: sqlite3.Row) -> DistanceRecord:
    return DistanceRecord(
        record_id=row["record_id"],
        ship_name=row["ship_name"],
        position=json.loads(row["position_json"]),
        calculated_at=parse_timestamp(row["calculated_at"]),
        next_waypoint=json.loads(row["next_waypoint_json"]),
        dist_to_scattery=row["dist_to_scattery"],
        speed=row["speed"],
        eta_kilcredaun=parse_timestamp(row["eta_kilcredaun"]),
        eta_scattery=parse_timestamp(row["eta_scattery"]),
        user=row["user"],
        timestamp=row["timestamp"],
    )
