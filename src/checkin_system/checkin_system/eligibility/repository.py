from __future__ import annotations

from typing import FrozenSet, Iterable, Optional, Protocol, Sequence

from ..access.model import AccessOverride, AttendanceScope, OverrideTarget, PersonUserLink, SessionAssignments
from ..core.enums import OverrideAccess, PolicyScope
from ..policies.model import Group, Policy
from ..sessions.model import Geofence, Session


class EligibilityRepository(Protocol):
    """Read-only lookups the eligibility engine needs.

    Implementations raise ``RepositoryError`` (or ``RepositoryTimeoutError``)
    on failure; they never return a fabricated "not found" to hide an error.
    """

    def get_session(self, *, org_id: str, session_id: str) -> Optional[Session]:
        """Session with its location, scoped to the organization."""

        raise NotImplementedError

    def get_geofence(self, *, location_id: str) -> Optional[Geofence]:
        raise NotImplementedError

    def get_policy(self, *, org_id: str, scope: PolicyScope, scope_id: Optional[str]) -> Optional[Policy]:
        raise NotImplementedError

    def get_group(self, *, group_id: str) -> Optional[Group]:
        raise NotImplementedError

    def list_attendance_scopes(self, *, event_id: str) -> Sequence[AttendanceScope]:
        raise NotImplementedError

    def get_session_assignments(self, *, session_id: str) -> SessionAssignments:
        raise NotImplementedError

    def find_group_memberships(self, *, person_id: str, group_ids: Iterable[str]) -> FrozenSet[str]:
        """Subset of ``group_ids`` the person belongs to."""

        raise NotImplementedError

    def find_cohort_memberships(self, *, person_id: str, cohort_ids: Iterable[str]) -> FrozenSet[str]:
        """Subset of ``cohort_ids`` the person belongs to."""

        raise NotImplementedError

    def get_person_link(self, *, org_id: str, user_id: str) -> Optional[PersonUserLink]:
        raise NotImplementedError

    def find_overrides(
        self,
        *,
        org_id: str,
        person_id: str,
        targets: Sequence[OverrideTarget],
        access: OverrideAccess,
    ) -> Sequence[AccessOverride]:
        """Overrides whose (scope_type, scope_id) pair equals one of ``targets``."""

        raise NotImplementedError

    def has_attendance_record(self, *, session_id: str, person_id: str) -> bool:
        raise NotImplementedError
