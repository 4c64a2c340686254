from __future__ import annotations

import pytest

from src.checkin_system.checkin_system.checkin.service import CheckinService
from src.checkin_system.checkin_system.core.enums import (
    CheckinMethod,
    DenialReason,
    IdentifierType,
    PolicyMode,
    SessionStatus,
)
from src.checkin_system.checkin_system.core.exceptions import CheckinDenied, NotFoundError, ValidationError
from src.checkin_system.checkin_system.eligibility.service import EligibilityService

from tests.helpers import (
    DURING,
    ORG,
    PERSON,
    SESSION,
    SITE_LNG,
    InMemoryAttendanceRepo,
    InMemoryPersonRepo,
    InMemorySessionRepo,
    SnapshotEligibilityRepo,
    make_context,
    make_person,
    make_session,
    north_of_site,
    open_policy,
)

NEAR = {"lat": north_of_site(20), "lng": SITE_LNG}


def build_service(*, context=None, people=None, attendance=None):
    context = context or make_context()
    attendance = attendance or InMemoryAttendanceRepo()
    service = CheckinService(
        EligibilityService(SnapshotEligibilityRepo(context)),
        attendance,
        InMemoryPersonRepo(people if people is not None else [make_person()]),
        InMemorySessionRepo([context.session()]),
    )
    return service, attendance


def test_public_checkin_by_session_code_records_manual_attendance():
    service, attendance = build_service()

    receipt = service.public_checkin(org_id=ORG, session_code="abc123", identifier="+15550100", now=DURING, **NEAR)

    assert receipt.message == "Welcome, Ada Lovelace! Check-in successful."
    assert receipt.session_id == SESSION
    assert receipt.person_id == PERSON
    record = attendance.records[0]
    assert record.method == "manual"
    assert record.status == "present"
    assert record.meta == {"self_checkin": True, "authenticated": False, "identifier_type": "phone"}
    assert receipt.to_dict()["record"] == {"id": 1, "session_id": SESSION, "person_id": PERSON}


def test_public_checkin_by_qr_token_and_email():
    service, attendance = build_service()

    service.public_checkin(
        org_id=ORG,
        qr_token="qr-secret-token",
        identifier="ADA@example.org",
        identifier_type=IdentifierType.EMAIL,
        now=DURING,
        **NEAR,
    )

    assert attendance.records[0].method == "qr"


def test_public_checkin_needs_code_or_token():
    service, _ = build_service()
    with pytest.raises(ValidationError):
        service.public_checkin(org_id=ORG, identifier="+15550100", now=DURING)


def test_public_checkin_unknown_session_code():
    service, _ = build_service()
    with pytest.raises(NotFoundError):
        service.public_checkin(org_id=ORG, session_code="NOPE", identifier="+15550100", now=DURING)


def test_public_checkin_needs_identifier():
    service, _ = build_service()
    with pytest.raises(ValidationError):
        service.public_checkin(org_id=ORG, session_code="ABC123", identifier=None, now=DURING)


def test_public_checkin_unknown_person():
    service, attendance = build_service(people=[])
    with pytest.raises(NotFoundError):
        service.public_checkin(org_id=ORG, session_code="ABC123", identifier="+15550100", now=DURING, **NEAR)
    assert attendance.records == []


def test_denied_checkin_raises_with_result_and_records_nothing():
    service, attendance = build_service()

    with pytest.raises(CheckinDenied) as exc_info:
        service.public_checkin(
            org_id=ORG,
            session_code="ABC123",
            identifier="+15550100",
            now=DURING,
            lat=north_of_site(500),
            lng=SITE_LNG,
        )

    assert exc_info.value.result.code == DenialReason.OUT_OF_RANGE
    assert exc_info.value.result.distance_meters == 500
    assert attendance.records == []


def test_authenticated_checkin_uses_linked_person():
    context = make_context(
        session_policy=open_policy(mode=PolicyMode.AUTHENTICATED),
        person_links={"user-7": PERSON},
    )
    service, attendance = build_service(context=context)

    receipt = service.authenticated_checkin(
        org_id=ORG, user_id="user-7", session_id=SESSION, method=CheckinMethod.GEO, now=DURING, **NEAR
    )

    assert receipt.message == "Check-in successful!"
    assert receipt.person_id == PERSON
    assert attendance.records[0].meta == {"self_checkin": True, "authenticated": True, "method_detail": "geo"}


def test_authenticated_checkin_rejects_kiosk_method():
    service, _ = build_service()
    with pytest.raises(ValidationError):
        service.authenticated_checkin(
            org_id=ORG, user_id="user-7", session_id=SESSION, method=CheckinMethod.KIOSK, now=DURING
        )


def test_authenticated_checkin_requires_session_id():
    service, _ = build_service()
    with pytest.raises(ValidationError):
        service.authenticated_checkin(org_id=ORG, user_id="user-7", session_id=None, method=CheckinMethod.GEO)


def test_kiosk_checkin_by_person_code():
    service, attendance = build_service()

    receipt = service.kiosk_checkin(org_id=ORG, session_id=SESSION, person_checkin_code="K-1001", now=DURING, **NEAR)

    assert receipt.message == "Welcome, Ada Lovelace!"
    assert attendance.records[0].method == "kiosk"
    assert attendance.records[0].meta == {"kiosk": True, "event_kiosk": True}


def test_kiosk_checkin_skips_inactive_person():
    service, _ = build_service(people=[make_person(is_active=False)])
    with pytest.raises(NotFoundError):
        service.kiosk_checkin(org_id=ORG, session_id=SESSION, person_checkin_code="K-1001", now=DURING, **NEAR)


def test_kiosk_checkin_requires_code():
    service, _ = build_service()
    with pytest.raises(ValidationError):
        service.kiosk_checkin(org_id=ORG, session_id=SESSION, person_checkin_code=None, now=DURING)


def test_storage_unique_key_settles_a_lost_race():
    # Eligibility sees no record yet, but a concurrent attempt has already inserted one.
    service, attendance = build_service(attendance=InMemoryAttendanceRepo(existing={(SESSION, PERSON)}))

    with pytest.raises(CheckinDenied) as exc_info:
        service.kiosk_checkin(org_id=ORG, session_id=SESSION, person_checkin_code="K-1001", now=DURING, **NEAR)

    assert exc_info.value.result.code == DenialReason.ALREADY_CHECKED_IN
    assert attendance.records == []


def test_second_checkin_is_denied_by_eligibility():
    context = make_context(checked_in=frozenset({PERSON}))
    service, _ = build_service(context=context)

    with pytest.raises(CheckinDenied) as exc_info:
        service.public_checkin(org_id=ORG, session_code="ABC123", identifier="+15550100", now=DURING, **NEAR)

    assert exc_info.value.result.code == DenialReason.ALREADY_CHECKED_IN


def test_cancelled_session_denied_for_kiosk():
    context = make_context(session=make_session(status=SessionStatus.CANCELLED))
    service, _ = build_service(context=context)

    with pytest.raises(CheckinDenied) as exc_info:
        service.kiosk_checkin(org_id=ORG, session_id=SESSION, person_checkin_code="K-1001", now=DURING)

    assert exc_info.value.result.code == DenialReason.SESSION_CANCELLED
