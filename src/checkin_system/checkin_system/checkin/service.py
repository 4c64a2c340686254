from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core.enums import CheckinMethod, DenialReason, IdentifierType
from ..core.exceptions import CheckinDenied, DuplicateAttendanceError, NotFoundError, ValidationError
from ..eligibility.model import EligibilityRequest, EligibilityResult
from ..eligibility.service import EligibilityService
from ..people.repository import PersonRepository
from ..sessions.repository import SessionRepository
from .model import STORED_METHOD, CheckinReceipt, NewAttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

SELF_SERVICE_METHODS = frozenset({CheckinMethod.GEO, CheckinMethod.EVENT_CODE, CheckinMethod.QR})


class CheckinService:
    """Use case: self/kiosk check-in = eligibility decision + attendance insert.

    The engine only advises; the unique (session, person) key in storage is
    what settles a race between two allowed attempts.
    """

    def __init__(
        self,
        eligibility: EligibilityService,
        attendance: AttendanceRepository,
        people: PersonRepository,
        sessions: SessionRepository,
    ):
        self._eligibility = eligibility
        self._attendance = attendance
        self._people = people
        self._sessions = sessions

    def public_checkin(
        self,
        *,
        org_id: str,
        identifier: Optional[str],
        identifier_type: IdentifierType = IdentifierType.PHONE,
        session_code: Optional[str] = None,
        qr_token: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        accuracy: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> CheckinReceipt:
        """No-login check-in: the caller names the session by code or QR token."""

        if session_code:
            session_id = self._sessions.find_id_by_public_code(org_id=org_id, public_code=session_code)
            method = CheckinMethod.EVENT_CODE
        elif qr_token:
            session_id = self._sessions.find_id_by_qr_token(org_id=org_id, qr_token=qr_token)
            method = CheckinMethod.QR
        else:
            raise ValidationError("Session code or QR token is required")

        if not session_id:
            raise NotFoundError("Invalid session code or QR. Please check and try again.")

        if not identifier:
            raise ValidationError("Phone number or email is required to identify you")

        person = self._people.find_by_identifier(org_id=org_id, identifier_type=identifier_type, identifier=identifier)
        if person is None:
            raise NotFoundError(
                "We couldn't find your profile. Please check your details or contact an administrator."
            )

        request = EligibilityRequest(
            org_id=org_id,
            session_id=session_id,
            method=method,
            person_id=person.person_id,
            lat=lat,
            lng=lng,
            accuracy=accuracy,
            event_code=session_code,
            qr_token=qr_token,
        )
        result = self._decide(request, now)
        record_id = self._record(
            request,
            result,
            meta={"self_checkin": True, "authenticated": False, "identifier_type": identifier_type.value},
        )
        return CheckinReceipt(
            record_id=record_id,
            session_id=session_id,
            person_id=person.person_id,
            message=f"Welcome, {person.full_name}! Check-in successful.",
        )

    def authenticated_checkin(
        self,
        *,
        org_id: str,
        user_id: str,
        session_id: Optional[str],
        method: CheckinMethod,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        accuracy: Optional[float] = None,
        event_code: Optional[str] = None,
        qr_token: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckinReceipt:
        if not session_id:
            raise ValidationError("Session ID is required")
        if method not in SELF_SERVICE_METHODS:
            raise ValidationError("Valid method is required (geo, event_code, qr)")

        request = EligibilityRequest(
            org_id=org_id,
            session_id=session_id,
            method=method,
            user_id=user_id,
            lat=lat,
            lng=lng,
            accuracy=accuracy,
            event_code=event_code,
            qr_token=qr_token,
        )
        result = self._decide(request, now)
        record_id = self._record(
            request,
            result,
            meta={"self_checkin": True, "authenticated": True, "method_detail": method.value},
        )
        return CheckinReceipt(
            record_id=record_id,
            session_id=session_id,
            person_id=result.person_id,
            message="Check-in successful!",
        )

    def kiosk_checkin(
        self,
        *,
        org_id: str,
        session_id: str,
        person_checkin_code: Optional[str],
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        accuracy: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> CheckinReceipt:
        if not person_checkin_code:
            raise ValidationError("person_checkin_code is required")

        person = self._people.find_active_by_checkin_code(org_id=org_id, checkin_code=person_checkin_code)
        if person is None:
            raise NotFoundError("Person not found")

        request = EligibilityRequest(
            org_id=org_id,
            session_id=session_id,
            method=CheckinMethod.KIOSK,
            person_id=person.person_id,
            lat=lat,
            lng=lng,
            accuracy=accuracy,
        )
        result = self._decide(request, now)
        record_id = self._record(request, result, meta={"kiosk": True, "event_kiosk": True})
        return CheckinReceipt(
            record_id=record_id,
            session_id=session_id,
            person_id=person.person_id,
            message=f"Welcome, {person.full_name}!",
        )

    def _decide(self, request: EligibilityRequest, now: Optional[datetime]) -> EligibilityResult:
        result = self._eligibility.check(request, now=now)
        if not result.allowed:
            raise CheckinDenied(result)
        return result

    def _record(self, request: EligibilityRequest, result: EligibilityResult, *, meta: dict) -> int:
        record = NewAttendanceRecord(
            org_id=request.org_id,
            session_id=request.session_id,
            person_id=result.person_id,
            method=STORED_METHOD[request.method],
            lat=request.lat,
            lng=request.lng,
            accuracy_m=request.accuracy,
            meta=meta,
        )
        try:
            record_id = self._attendance.create_record(record)
        except DuplicateAttendanceError:
            # Lost the race against a concurrent attempt for the same person.
            logger.info("duplicate check-in rejected by storage session=%s", request.session_id)
            raise CheckinDenied(EligibilityResult.deny(DenialReason.ALREADY_CHECKED_IN, policy=result.policy)) from None
        logger.info("attendance recorded session=%s record=%s method=%s", request.session_id, record_id, record.method)
        return record_id
