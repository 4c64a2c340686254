import os

from config.config import (  # noqa: F401
    CHECKIN_EARLY_MINUTES,
    CHECKIN_LATE_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_M,
    db_config_from_env,
    env_flag,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
