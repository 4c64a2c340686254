from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import CHECKIN_EARLY_MINUTES, CHECKIN_LATE_MINUTES, DEFAULT_GEOFENCE_RADIUS_M


@dataclass(frozen=True)
class EngineSettings:
    early_minutes: int = CHECKIN_EARLY_MINUTES
    late_minutes: int = CHECKIN_LATE_MINUTES
    default_radius_m: int = DEFAULT_GEOFENCE_RADIUS_M

    def __post_init__(self):
        if self.early_minutes < 0 or self.late_minutes < 0:
            raise ValueError("check-in window offsets must not be negative")
        if self.default_radius_m <= 0:
            raise ValueError("default geofence radius must be positive")

    @classmethod
    def from_settings(cls, settings) -> "EngineSettings":
        """Build from a config module (see ``config.get_settings_module``)."""
        return cls(
            early_minutes=int(getattr(settings, "CHECKIN_EARLY_MINUTES", CHECKIN_EARLY_MINUTES)),
            late_minutes=int(getattr(settings, "CHECKIN_LATE_MINUTES", CHECKIN_LATE_MINUTES)),
            default_radius_m=int(getattr(settings, "DEFAULT_GEOFENCE_RADIUS_M", DEFAULT_GEOFENCE_RADIUS_M)),
        )
