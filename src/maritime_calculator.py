from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

# Kilcredaun to Scattery Island, nautical miles.
SCATTERY_OFFSET_NM = 9.0


@dataclass(frozen=True)
class Waypoint:
    name: str
    lat: float
    long: float
    dist: float
    use: str


@dataclass
class ShipPosition:
    """Reported position in degrees + decimal minutes; longitude is degrees west."""

    lat: float = 53.0
    latmin: float = 0.0
    long: float = 10.0
    longmin: float = 0.0
    speed: float = 10.0
    delay_hrs: float = 0.0
    delay_mns: float = 0.0

    @property
    def lat_decimal(self) -> float:
        return self.lat + self.latmin / 60.0

    @property
    def long_decimal(self) -> float:
        return self.long + self.longmin / 60.0

    def as_dict(self) -> dict[str, float]:
        return {
            "lat": self.lat,
            "latmin": self.latmin,
            "long": self.long,
            "longmin": self.longmin,
            "speed": self.speed,
            "delay_hrs": self.delay_hrs,
            "delay_mns": self.delay_mns,
        }


@dataclass(frozen=True)
class CalculationResult:
    from_time: datetime
    next_waypoint: Waypoint
    dist_to_waypoint: float
    dist_to_kilcredaun: float
    dist_to_scattery: float
    hours_to_kilcredaun: float
    eta_kilcredaun: datetime
    eta_scattery: datetime


WAYPOINTS: tuple[Waypoint, ...] = (
    Waypoint("Kilcreadaun", 52.55333, -9.71667, 0.0, "Kilcreadaun"),
    Waypoint("Loop Head", 52.53333, -10.0, 10.43, "Loop Head"),
    Waypoint("Slyne Head", 53.40000, -10.46667, 65.11, "Slyne Head"),
    Waypoint("Black Rock", 54.08333, -10.48333, 106.12, "Black Rock"),
    Waypoint("Eagle Island", 54.31333, -10.33333, 120.89, "Eagle Island"),
    Waypoint("Tory Island", 55.32167, -8.28333, 214.19, "Tory Island"),
    Waypoint("Inishtrahull", 55.50833, -7.23333, 251.74, "Inishtrahull"),
    Waypoint("Middle Bank", 55.42500, -6.24333, 285.86, "Middle Bank"),
    Waypoint("Rathlin TSS", 55.40167, -6.05, 292.60, "Rathlin TSS"),
    Waypoint("East Maiden", 55.06667, -5.46667, 320.96, "East Maiden"),
    Waypoint("Black Head", 54.75833, -5.63333, 340.33, "Black Head"),
    Waypoint("Inishtoosk", 52.15935, -10.61583, 40.63, "Inishtoosk"),
    Waypoint("Inishtearaght", 52.08675, -10.72698, 46.61, "Inishtearaght"),
    Waypoint("Little Foze", 52.01442, -10.75322, 51.05, "Little Foze"),
    Waypoint("Skellig", 51.75122, -10.60485, 67.7783, "Skellig"),
    Waypoint("Bull", 51.56700, -10.3489, 82.3865, "Bull"),
    Waypoint("Fastnet", 51.25328, -9.57865, 116.877, "Fastnet"),
    Waypoint("BANN SHOAL BUOY", 50.34187, -5.88902, 267.458, "BANN SHOAL BUOY"),
    Waypoint("Wolf Rock", 49.99257, -5.8866, 288.42, "Wolf Rock"),
    Waypoint("Lizard", 49.90167, -5.20282, 315.45, "Lizard"),
    Waypoint("CS1", 50.53037, -0.05217, 517.30, "CS1"),
    Waypoint("Scilly", 49.72, -6.6412, 261.88, "Scilly"),
)

# Points just past a waypoint: a ship here has already rounded it and is
# heading for the waypoint named in ``use``.
_GUARD_POINTS: tuple[tuple[float, float, str], ...] = (
    (52.532953, -9.99620, "Kilcreadaun"),
    (53.39683, -10.46664, "Loop Head"),
    (54.08, -10.48333, "Slyne Head"),
    (54.31333, -10.33633, "Black Rock"),
    (55.31951, -8.28533, "Eagle Island"),
    (55.50833, -7.23433, "Tory Island"),
    (55.42549, -6.243823, "Inishtrahull"),
    (55.40236, -6.05070, "Middle Bank"),
    (55.06903, -5.46967, "Rathlin TSS"),
    (54.76152, -5.63633, "East Maiden"),
    (52.16129, -10.61883, "Kilcreadaun"),
    (52.2, -10.4, "Kilcreadaun"),
    (52.08918, -10.72998, "Inishtoosk"),
    (52.01767, -10.75324, "Inishtearaght"),
    (51.75121, -10.60785, "Little Foze"),
    (51.75122, -10.75322, "Little Foze"),
    (51.5670, -10.35190, "Skellig"),
    (51.25328, -9.58165, "Bull"),
    (50.34487, -5.89052, "Fastnet"),
    (49.9959, -5.89660, "BANN SHOAL BUOY"),
    (49.89867, -5.20582, "Wolf Rock"),
    (50.52974, -0.05317, "Lizard"),
    (49.72, -6.6418, "Bull"),
    (49.99, -5.89, "Scilly"),
)

GUARD_POINTS: tuple[Waypoint, ...] = tuple(
    Waypoint(f"guard {use}", lat, long, 1_000_000.0, use) for lat, long, use in _GUARD_POINTS
)

_WAYPOINT_BY_NAME = {wp.name: wp for wp in WAYPOINTS}


def _calc_error(field: str, issue: str, hint: str) -> str:
    return f"Distance to Shannon / {field}: {issue}. Fix: {hint}."


def _parse_float(value: Any, *, field: str, hint: str) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(_calc_error(field, "must be numeric", hint)) from exc
    if not math.isfinite(out):
        raise ValueError(_calc_error(field, "must be finite", hint))
    return out


def great_circle_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    if lat1 == lat2 and lon1 == lon2:
        return 0.0
    radlat1 = math.radians(lat1)
    radlat2 = math.radians(lat2)
    radtheta = math.radians(lon1 - lon2)
    cos_angle = math.sin(radlat1) * math.sin(radlat2) + math.cos(radlat1) * math.cos(radlat2) * math.cos(radtheta)
    cos_angle = min(1.0, cos_angle)
    return math.degrees(math.acos(cos_angle)) * 60.0


def find_next_waypoint(lat: float, long_west: float) -> Waypoint:
    nearest = None
    nearest_dist = math.inf
    for point in WAYPOINTS + GUARD_POINTS:
        dist = great_circle_nm(lat, -long_west, point.lat, point.long)
        if dist < nearest_dist:
            nearest_dist = dist
            nearest = point
    if nearest is None:
        return WAYPOINTS[0]
    return _WAYPOINT_BY_NAME.get(nearest.use, WAYPOINTS[0])


def validate_position(position: ShipPosition) -> None:
    speed = _parse_float(position.speed, field="Speed", hint="enter the speed over ground in knots")
    if speed <= 0:
        raise ValueError(_calc_error("Speed", f"speed must be > 0 knots, got {speed}", "enter a positive speed"))
    lat = _parse_float(position.lat_decimal, field="Latitude", hint="enter degrees and minutes north")
    if lat < -90.0 or lat > 90.0:
        raise ValueError(_calc_error("Latitude", f"value {lat} is outside [-90, 90]", "check the degrees field"))


def _from_time(position: ShipPosition, now: datetime | None) -> datetime:
    base = now or datetime.now()
    return base - timedelta(hours=position.delay_hrs, minutes=position.delay_mns)


def _result(position: ShipPosition, waypoint: Waypoint, now: datetime | None) -> CalculationResult:
    validate_position(position)
    from_time = _from_time(position, now)
    dist_to_wp = great_circle_nm(position.lat_decimal, -position.long_decimal, waypoint.lat, waypoint.long)
    dist_to_kil = dist_to_wp + waypoint.dist
    hours_to_kil = dist_to_kil / position.speed
    eta_kil = from_time + timedelta(hours=hours_to_kil)
    eta_scattery = eta_kil + timedelta(hours=SCATTERY_OFFSET_NM / position.speed)
    return CalculationResult(
        from_time=from_time,
        next_waypoint=waypoint,
        dist_to_waypoint=dist_to_wp,
        dist_to_kilcredaun=dist_to_kil,
        dist_to_scattery=dist_to_kil + SCATTERY_OFFSET_NM,
        hours_to_kilcredaun=hours_to_kil,
        eta_kilcredaun=eta_kil,
        eta_scattery=eta_scattery,
    )


def calculate(position: ShipPosition, now: datetime | None = None) -> CalculationResult:
    waypoint = find_next_waypoint(position.lat_decimal, position.long_decimal)
    return _result(position, waypoint, now)


def calculate_with_waypoint(
    position: ShipPosition,
    waypoint: Waypoint,
    now: datetime | None = None,
) -> CalculationResult:
    """Same as calculate() but routes via a waypoint the user picked."""

    return _result(position, waypoint, now)


def parse_coordinates(text: str, *, speed: float = 10.0) -> ShipPosition:
    """Parse pasted ``"lat, long"`` decimal degrees into a ShipPosition."""

    parts = [part.strip() for part in str(text).split(",")]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValueError(
            _calc_error(
                "Coordinates",
                f"expected 'lat, long' but got '{str(text).strip()}'",
                "paste decimal degrees such as 52.5, -9.8",
            )
        )
    lat_raw = _parse_float(parts[0], field="Latitude", hint="paste decimal degrees such as 52.5")
    long_raw = _parse_float(parts[1], field="Longitude", hint="paste decimal degrees such as -9.8")

    lat = math.floor(lat_raw)
    abs_long = abs(long_raw)
    long_deg = math.floor(abs_long)
    return ShipPosition(
        lat=float(lat),
        latmin=(lat_raw - lat) * 60.0,
        long=float(long_deg),
        longmin=(abs_long - long_deg) * 60.0,
        speed=speed,
    )


def format_coords(position: ShipPosition | dict[str, float] | None) -> str:
    if not position:
        return ""
    if isinstance(position, dict):
        position = ShipPosition(**{k: float(v) for k, v in position.items() if k in ShipPosition.__dataclass_fields__})
    return f"{position.lat_decimal:.4f}, -{position.long_decimal:.4f}"
