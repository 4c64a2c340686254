import os

from config.config import (  # noqa: F401
    CHECKIN_EARLY_MINUTES,
    CHECKIN_LATE_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_M,
    db_config_from_env,
    env_flag,
)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_password="dev")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
