from __future__ import annotations

import pytest

from src.checkin_system.checkin_system.access.model import PersonUserLink, SessionAssignments
from src.checkin_system.checkin_system.core.enums import CheckinMethod, DenialReason, PolicyMode, PolicyScope
from src.checkin_system.checkin_system.core.exceptions import RepositoryError, RepositoryTimeoutError
from src.checkin_system.checkin_system.eligibility.repository import EligibilityRepository
from src.checkin_system.checkin_system.eligibility.service import EligibilityService
from src.checkin_system.checkin_system.sessions.model import AllowedMethods

from tests.helpers import DURING, ORG, PERSON, SESSION, make_request, make_session, open_policy


class RecordingEligibilityRepo(EligibilityRepository):
    """In-memory repository that records every read it serves."""

    def __init__(self, *, session=None, policies=None, links=None, checked_in=()):
        self.session = session if session is not None else make_session()
        self.policies = policies if policies is not None else {(PolicyScope.SESSION, SESSION): open_policy()}
        self.links = links or {}
        self.checked_in = set(checked_in)
        self.calls = []
        self.fail_on = {}

    def _record(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def get_session(self, *, org_id, session_id):
        self._record("get_session")
        if self.session.org_id == org_id and self.session.session_id == session_id:
            return self.session
        return None

    def get_geofence(self, *, location_id):
        self._record("get_geofence")
        return None

    def get_policy(self, *, org_id, scope, scope_id):
        self._record("get_policy")
        return self.policies.get((scope, scope_id))

    def get_group(self, *, group_id):
        self._record("get_group")
        return None

    def list_attendance_scopes(self, *, event_id):
        self._record("list_attendance_scopes")
        return []

    def get_session_assignments(self, *, session_id):
        self._record("get_session_assignments")
        return SessionAssignments()

    def find_group_memberships(self, *, person_id, group_ids):
        self._record("find_group_memberships")
        return frozenset()

    def find_cohort_memberships(self, *, person_id, cohort_ids):
        self._record("find_cohort_memberships")
        return frozenset()

    def get_person_link(self, *, org_id, user_id):
        self._record("get_person_link")
        person_id = self.links.get(user_id)
        return PersonUserLink(org_id=org_id, user_id=user_id, person_id=person_id) if person_id else None

    def find_overrides(self, *, org_id, person_id, targets, access):
        self._record("find_overrides")
        return []

    def has_attendance_record(self, *, session_id, person_id):
        self._record("has_attendance_record")
        return person_id in self.checked_in


def test_check_allows_with_repository_context():
    repo = RecordingEligibilityRepo()
    result = EligibilityService(repo).check(make_request(), now=DURING)

    assert result.allowed is True
    assert result.person_id == PERSON
    assert repo.calls[0] == "get_session"
    assert "has_attendance_record" in repo.calls


def test_method_disabled_reads_nothing_but_the_session():
    repo = RecordingEligibilityRepo(session=make_session(allowed_methods=AllowedMethods(qr=False)))
    result = EligibilityService(repo).check(make_request(method=CheckinMethod.QR), now=DURING)

    assert result.code == DenialReason.METHOD_DISABLED
    assert repo.calls == ["get_session"]


def test_unknown_session_reads_nothing_else():
    repo = RecordingEligibilityRepo()
    result = EligibilityService(repo).check(make_request(session_id="missing"), now=DURING)

    assert result.code == DenialReason.SESSION_NOT_FOUND
    assert repo.calls == ["get_session"]


def test_policy_disabled_stops_before_identity_reads():
    repo = RecordingEligibilityRepo(policies={})
    result = EligibilityService(repo).check(make_request(), now=DURING)

    assert result.code == DenialReason.POLICY_DISABLED
    assert "get_person_link" not in repo.calls
    assert "has_attendance_record" not in repo.calls


def test_authenticated_check_resolves_link_once():
    repo = RecordingEligibilityRepo(
        policies={(PolicyScope.SESSION, SESSION): open_policy(mode=PolicyMode.AUTHENTICATED)},
        links={"user-9": PERSON},
    )
    result = EligibilityService(repo).check(make_request(person_id=None, user_id="user-9"), now=DURING)

    assert result.allowed is True
    assert repo.calls.count("get_person_link") == 1


def test_clock_is_used_when_now_is_omitted():
    repo = RecordingEligibilityRepo()
    service = EligibilityService(repo, clock=lambda: DURING)
    assert service.check(make_request()).allowed is True


@pytest.mark.parametrize("error", [RepositoryError("connection reset"), RepositoryTimeoutError("read timed out")])
def test_repository_failure_propagates_instead_of_denying(error):
    repo = RecordingEligibilityRepo()
    repo.fail_on["list_attendance_scopes"] = error

    with pytest.raises(RepositoryError):
        EligibilityService(repo).check(make_request(), now=DURING)


def test_duplicate_is_reported_by_repository_read():
    repo = RecordingEligibilityRepo(checked_in={PERSON})
    result = EligibilityService(repo).check(make_request(org_id=ORG), now=DURING)
    assert result.code == DenialReason.ALREADY_CHECKED_IN
