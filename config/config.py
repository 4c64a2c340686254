"""Settings shared by every environment module."""

import os


def env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def env_flag(name: str, default: bool) -> bool:
    return bool(int(os.getenv(name, "1" if default else "0")))


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": env_int("DB_PORT", 3306),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "checkin_db"),
        "connection_timeout": env_int("DB_CONNECT_TIMEOUT", 5),
        "read_timeout_ms": env_int("DB_READ_TIMEOUT_MS", 3000),
    }


# Self check-in window and geofence defaults.
CHECKIN_EARLY_MINUTES = env_int("CHECKIN_EARLY_MINUTES", 15)
CHECKIN_LATE_MINUTES = env_int("CHECKIN_LATE_MINUTES", 30)
DEFAULT_GEOFENCE_RADIUS_M = env_int("DEFAULT_GEOFENCE_RADIUS_M", 100)
