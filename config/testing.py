import os

from config.config import (  # noqa: F401
    CHECKIN_EARLY_MINUTES,
    CHECKIN_LATE_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_M,
    db_config_from_env,
)

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False
