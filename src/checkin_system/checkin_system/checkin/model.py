from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import CheckinMethod


# What gets written to attendance_records.method; the event code flow is "manual".
STORED_METHOD = {
    CheckinMethod.QR: "qr",
    CheckinMethod.GEO: "geo",
    CheckinMethod.EVENT_CODE: "manual",
    CheckinMethod.KIOSK: "kiosk",
}


@dataclass(frozen=True)
class NewAttendanceRecord:
    org_id: str
    session_id: str
    person_id: str
    method: str
    status: str = "present"
    lat: Optional[float] = None
    lng: Optional[float] = None
    accuracy_m: Optional[float] = None
    meta: dict = field(default_factory=dict)


@dataclass(frozen=True)
class CheckinReceipt:
    record_id: int
    session_id: str
    person_id: str
    message: str

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": self.message,
            "record": {"id": self.record_id, "session_id": self.session_id, "person_id": self.person_id},
        }
