from dataclasses import dataclass

@dataclass(frozen=True)
class AppConfig:
    debug: bool = True
    log_level: str = "DEBUG"  # change to "INFO" later
    sqlite_db_path: str = "port_visits.db"
    history_days: int = 7
    history_limit: int = 50
    recorded_by: str = "Unknown"
    default_speed_knots: float = 10.0
