"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CHECKIN_EARLY_MINUTES = 15
CHECKIN_LATE_MINUTES = 30
DEFAULT_GEOFENCE_RADIUS_M = 100
EARTH_RADIUS_M = 6_371_000

ELIGIBLE_MESSAGE = "Eligible for check-in"
