from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.geo import Coordinate
from ..core.enums import CheckinMethod, SessionStatus


@dataclass(frozen=True)
class Location:
    location_id: str
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.lat is None or self.lng is None:
            return None
        return Coordinate(lat=float(self.lat), lng=float(self.lng))


@dataclass(frozen=True)
class Geofence:
    location_id: str
    radius_m: Optional[int]
    shape: str = "circle"


@dataclass(frozen=True)
class AllowedMethods:
    """Per-method switches; anything not explicitly ``False`` is allowed."""

    qr: Optional[bool] = None
    geo: Optional[bool] = None
    kiosk: Optional[bool] = None
    manual: Optional[bool] = None

    @classmethod
    def from_mapping(cls, raw: Optional[dict]) -> "AllowedMethods":
        raw = raw or {}
        return cls(
            qr=raw.get("qr"),
            geo=raw.get("geo"),
            kiosk=raw.get("kiosk"),
            manual=raw.get("manual"),
        )

    def allows(self, method: CheckinMethod) -> bool:
        flag = {
            CheckinMethod.QR: self.qr,
            CheckinMethod.GEO: self.geo,
            CheckinMethod.EVENT_CODE: self.manual,
            CheckinMethod.KIOSK: self.kiosk,
        }[method]
        return flag is not False


@dataclass(frozen=True)
class Session:
    """Domain entity: a scheduled session/event people check in to."""

    session_id: str
    org_id: str
    name: str
    start_at: datetime
    end_at: datetime
    status: SessionStatus
    location: Optional[Location] = None
    group_id: Optional[str] = None
    public_code: Optional[str] = None
    qr_token: Optional[str] = None
    allowed_methods: AllowedMethods = field(default_factory=AllowedMethods)

    @property
    def location_id(self) -> Optional[str]:
        return self.location.location_id if self.location else None
