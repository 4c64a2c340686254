"""Shared in-memory fixtures for the test suite (no database)."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from math import pi

from src.checkin_system.checkin_system.access.model import PersonUserLink, SessionAssignments
from src.checkin_system.checkin_system.checkin.repository import AttendanceRepository
from src.checkin_system.checkin_system.core.constants import EARTH_RADIUS_M
from src.checkin_system.checkin_system.core.enums import (
    CheckinMethod,
    EligibleSet,
    IdentifierType,
    PolicyMode,
    PolicyScope,
    SessionStatus,
)
from src.checkin_system.checkin_system.core.exceptions import DuplicateAttendanceError
from src.checkin_system.checkin_system.eligibility.context import SnapshotContext
from src.checkin_system.checkin_system.eligibility.model import EligibilityRequest
from src.checkin_system.checkin_system.eligibility.repository import EligibilityRepository
from src.checkin_system.checkin_system.people.model import Person
from src.checkin_system.checkin_system.people.repository import PersonRepository
from src.checkin_system.checkin_system.policies.model import Policy
from src.checkin_system.checkin_system.sessions.model import AllowedMethods, Location, Session
from src.checkin_system.checkin_system.sessions.repository import SessionRepository

ORG = "org-1"
SESSION = "sess-1"
GROUP = "grp-1"
LOCATION = "loc-1"
PERSON = "person-1"

START = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=2)
DURING = START + timedelta(minutes=30)

SITE_LAT = 40.0
SITE_LNG = -74.0


def north_of_site(meters: float) -> float:
    """Latitude ``meters`` due north of the site (exact on the haversine sphere)."""
    return SITE_LAT + meters / EARTH_RADIUS_M * 180 / pi


def make_session(**overrides) -> Session:
    base = Session(
        session_id=SESSION,
        org_id=ORG,
        name="Tuesday practice",
        start_at=START,
        end_at=END,
        status=SessionStatus.SCHEDULED,
        location=Location(location_id=LOCATION, lat=SITE_LAT, lng=SITE_LNG),
        group_id=None,
        public_code="ABC123",
        qr_token="qr-secret-token",
        allowed_methods=AllowedMethods(),
    )
    return replace(base, **overrides)


def open_policy(**overrides) -> Policy:
    """Public policy that only requires the geofence."""
    base = Policy(
        mode=PolicyMode.PUBLIC_WITH_CODE,
        eligible_set=EligibleSet.ALL_MEMBERS,
        require_linked_user=False,
        require_geofence=True,
        require_event_code=False,
    )
    return replace(base, **overrides)


def make_context(*, session=None, session_policy=None, **overrides) -> SnapshotContext:
    policies = dict(overrides.pop("policies", {}))
    if session_policy is not None:
        policies[(PolicyScope.SESSION, SESSION)] = session_policy
    elif not policies:
        policies[(PolicyScope.SESSION, SESSION)] = open_policy()
    return SnapshotContext(
        session_row=session or make_session(),
        policies=policies,
        assignments=overrides.pop("assignments", SessionAssignments()),
        **overrides,
    )


def make_request(**overrides) -> EligibilityRequest:
    base = EligibilityRequest(
        org_id=ORG,
        session_id=SESSION,
        method=CheckinMethod.GEO,
        person_id=PERSON,
        lat=north_of_site(10),
        lng=SITE_LNG,
    )
    return replace(base, **overrides)


class SnapshotEligibilityRepo(EligibilityRepository):
    """Eligibility repository answering from a ``SnapshotContext``."""

    def __init__(self, context: SnapshotContext):
        self.context = context

    def get_session(self, *, org_id, session_id):
        session = self.context.session()
        if session is None or session.org_id != org_id or session.session_id != session_id:
            return None
        return session

    def get_geofence(self, *, location_id):
        return self.context.geofence(location_id)

    def get_policy(self, *, org_id, scope, scope_id):
        return self.context.policy(scope, scope_id)

    def get_group(self, *, group_id):
        return self.context.group(group_id)

    def list_attendance_scopes(self, *, event_id):
        return self.context.attendance_scopes()

    def get_session_assignments(self, *, session_id):
        return self.context.session_assignments()

    def find_group_memberships(self, *, person_id, group_ids):
        return self.context.group_memberships(person_id, group_ids)

    def find_cohort_memberships(self, *, person_id, cohort_ids):
        return self.context.cohort_memberships(person_id, cohort_ids)

    def get_person_link(self, *, org_id, user_id):
        person_id = self.context.linked_person_id(user_id)
        return PersonUserLink(org_id=org_id, user_id=user_id, person_id=person_id) if person_id else None

    def find_overrides(self, *, org_id, person_id, targets, access):
        return list(self.context.overrides(person_id, targets, access))

    def has_attendance_record(self, *, session_id, person_id):
        return self.context.has_attendance(person_id)


class InMemoryPersonRepo(PersonRepository):
    def __init__(self, people=()):
        self.people = list(people)

    def find_by_identifier(self, *, org_id, identifier_type, identifier):
        for p in self.people:
            if p.org_id != org_id:
                continue
            if identifier_type == IdentifierType.EMAIL:
                if p.email and p.email.lower() == identifier.lower():
                    return p
            elif getattr(p, identifier_type.value) == identifier:
                return p
        return None

    def find_active_by_checkin_code(self, *, org_id, checkin_code):
        for p in self.people:
            if p.org_id == org_id and p.checkin_code == checkin_code and p.is_active:
                return p
        return None


class InMemorySessionRepo(SessionRepository):
    def __init__(self, sessions=()):
        self.sessions = list(sessions)

    def find_id_by_public_code(self, *, org_id, public_code):
        for s in self.sessions:
            if s.org_id == org_id and s.public_code and s.public_code.upper() == public_code.upper():
                return s.session_id
        return None

    def find_id_by_qr_token(self, *, org_id, qr_token):
        for s in self.sessions:
            if s.org_id == org_id and s.qr_token == qr_token:
                return s.session_id
        return None


class InMemoryAttendanceRepo(AttendanceRepository):
    """Enforces the (session, person) unique key like the real table."""

    def __init__(self, existing=()):
        self.records = []
        self._keys = set(existing)

    def create_record(self, record):
        key = (record.session_id, record.person_id)
        if key in self._keys:
            raise DuplicateAttendanceError(f"duplicate attendance for {key}")
        self._keys.add(key)
        self.records.append(record)
        return len(self.records)


def make_person(**overrides) -> Person:
    base = Person(
        person_id=PERSON,
        org_id=ORG,
        full_name="Ada Lovelace",
        email="ada@example.org",
        phone="+15550100",
        checkin_code="K-1001",
    )
    return replace(base, **overrides)
