from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.geo import Coordinate
from ..core.constants import ELIGIBLE_MESSAGE
from ..core.enums import CheckinMethod, DenialReason
from ..policies.model import PolicySnapshot

REASON_MESSAGES = {
    DenialReason.SESSION_NOT_FOUND: "Session not found",
    DenialReason.METHOD_DISABLED: "This check-in method is not enabled for this event",
    DenialReason.SESSION_CANCELLED: "This session has been cancelled",
    DenialReason.NOT_YET_OPEN: "Check-in is not yet open. Please wait until closer to the session start time.",
    DenialReason.WINDOW_CLOSED: "Check-in window has closed for this session",
    DenialReason.POLICY_DISABLED: "Self check-in is not enabled for this session",
    DenialReason.LOCATION_REQUIRED: "Location access is required for check-in. Please enable location services.",
    DenialReason.LOCATION_NOT_CONFIGURED: "Session location is not configured for geofence check-in",
    DenialReason.OUT_OF_RANGE: (
        "You are {distance}m away from the check-in zone. Please move within {radius}m of the location."
    ),
    DenialReason.INVALID_EVENT_CODE: "Invalid event code. Please check and try again.",
    DenialReason.INVALID_QR_TOKEN: "Invalid QR code. Please scan the correct event QR.",
    DenialReason.CODE_REQUIRED: "Event code or QR scan is required for check-in",
    DenialReason.LOGIN_REQUIRED: "Please sign in to check in to this session",
    DenialReason.IDENTITY_UNLINKED: (
        "Your account is not linked to a member profile. "
        "Please check your invite or contact an administrator."
    ),
    DenialReason.UNRESOLVED_IDENTITY: "Unable to identify member for check-in",
    DenialReason.NOT_IN_EVENT_SCOPE: "You are not assigned to this event",
    DenialReason.NOT_ASSIGNED_TO_SESSION: "You are not assigned to this session",
    DenialReason.NOT_GROUP_MEMBER: "You are not a member of the group for this session",
    DenialReason.ACCESS_DENIED_BY_OVERRIDE: (
        "Your check-in access has been restricted. Please contact an administrator."
    ),
    DenialReason.ALREADY_CHECKED_IN: "You have already checked in to this session",
}


@dataclass(frozen=True)
class EligibilityRequest:
    """One check-in attempt, as described by the caller."""

    org_id: str
    session_id: str
    method: CheckinMethod
    person_id: Optional[str] = None
    user_id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    accuracy: Optional[float] = None
    event_code: Optional[str] = None
    qr_token: Optional[str] = None

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.lat is None or self.lng is None:
            return None
        return Coordinate(lat=float(self.lat), lng=float(self.lng))


@dataclass(frozen=True)
class EligibilityResult:
    """Decision returned by the engine.

    ``reason`` is always populated; ``code`` is the machine-readable variant.
    ``person_id`` is set on success so the caller knows whom to check in.
    """

    allowed: bool
    reason: str
    code: DenialReason
    policy: Optional[PolicySnapshot] = None
    requires_invite: Optional[bool] = None
    requires_login: Optional[bool] = None
    distance_meters: Optional[int] = None
    geofence_radius: Optional[int] = None
    person_id: Optional[str] = None

    @classmethod
    def deny(
        cls,
        code: DenialReason,
        *,
        reason: Optional[str] = None,
        policy: Optional[PolicySnapshot] = None,
        **diagnostics,
    ) -> "EligibilityResult":
        return cls(
            allowed=False,
            reason=reason or REASON_MESSAGES[code],
            code=code,
            policy=policy,
            **diagnostics,
        )

    @classmethod
    def allow(cls, *, person_id: str, policy: PolicySnapshot) -> "EligibilityResult":
        return cls(
            allowed=True,
            reason=ELIGIBLE_MESSAGE,
            code=DenialReason.ELIGIBLE,
            policy=policy,
            person_id=person_id,
        )

    def to_dict(self) -> dict:
        out: dict = {"allowed": self.allowed, "reason": self.reason, "code": self.code.value}
        if self.policy is not None:
            out["policy"] = self.policy.to_dict()
        optional = {
            "requiresInvite": self.requires_invite,
            "requiresLogin": self.requires_login,
            "distanceMeters": self.distance_meters,
            "geofenceRadius": self.geofence_radius,
            "personId": self.person_id,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out
