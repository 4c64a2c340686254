from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Protocol, Sequence, Tuple

from ..access.model import AccessOverride, AttendanceScope, OverrideTarget, SessionAssignments
from ..core.enums import OverrideAccess, PolicyScope
from ..policies.model import Group, Policy
from ..sessions.model import Geofence, Session
from .repository import EligibilityRepository


class EvaluationContext(Protocol):
    """Everything the gates may read about one (org, session) evaluation.

    Gates only read through this interface, so the same pipeline runs over a
    lazy repository-backed context or a fully loaded in-memory snapshot.
    """

    def session(self) -> Optional[Session]: ...

    def policy(self, scope: PolicyScope, scope_id: Optional[str]) -> Optional[Policy]: ...

    def group(self, group_id: str) -> Optional[Group]: ...

    def geofence(self, location_id: str) -> Optional[Geofence]: ...

    def linked_person_id(self, user_id: str) -> Optional[str]: ...

    def attendance_scopes(self) -> Sequence[AttendanceScope]: ...

    def session_assignments(self) -> SessionAssignments: ...

    def group_memberships(self, person_id: str, group_ids: Iterable[str]) -> FrozenSet[str]: ...

    def cohort_memberships(self, person_id: str, cohort_ids: Iterable[str]) -> FrozenSet[str]: ...

    def overrides(
        self, person_id: str, targets: Sequence[OverrideTarget], access: OverrideAccess
    ) -> Sequence[AccessOverride]: ...

    def has_attendance(self, person_id: str) -> bool: ...


class RepositoryContext:
    """Lazy context: each lookup hits the repository at most once.

    Reads happen only when a gate asks for them, so an early denial never
    triggers the reads of later stages.
    """

    def __init__(self, repo: EligibilityRepository, *, org_id: str, session_id: str):
        self._repo = repo
        self._org_id = org_id
        self._session_id = session_id
        self._cache: Dict[tuple, object] = {}

    def _memo(self, key: tuple, load):
        if key not in self._cache:
            self._cache[key] = load()
        return self._cache[key]

    def session(self) -> Optional[Session]:
        return self._memo(
            ("session",),
            lambda: self._repo.get_session(org_id=self._org_id, session_id=self._session_id),
        )

    def policy(self, scope: PolicyScope, scope_id: Optional[str]) -> Optional[Policy]:
        return self._memo(
            ("policy", scope, scope_id),
            lambda: self._repo.get_policy(org_id=self._org_id, scope=scope, scope_id=scope_id),
        )

    def group(self, group_id: str) -> Optional[Group]:
        return self._memo(("group", group_id), lambda: self._repo.get_group(group_id=group_id))

    def geofence(self, location_id: str) -> Optional[Geofence]:
        return self._memo(("geofence", location_id), lambda: self._repo.get_geofence(location_id=location_id))

    def linked_person_id(self, user_id: str) -> Optional[str]:
        def load():
            link = self._repo.get_person_link(org_id=self._org_id, user_id=user_id)
            return link.person_id if link else None

        return self._memo(("link", user_id), load)

    def attendance_scopes(self) -> Sequence[AttendanceScope]:
        return self._memo(
            ("scopes",),
            lambda: tuple(self._repo.list_attendance_scopes(event_id=self._session_id)),
        )

    def session_assignments(self) -> SessionAssignments:
        return self._memo(
            ("assignments",),
            lambda: self._repo.get_session_assignments(session_id=self._session_id),
        )

    def group_memberships(self, person_id: str, group_ids: Iterable[str]) -> FrozenSet[str]:
        ids = frozenset(group_ids)
        if not ids:
            return frozenset()
        return self._memo(
            ("groups", person_id, ids),
            lambda: frozenset(self._repo.find_group_memberships(person_id=person_id, group_ids=sorted(ids))),
        )

    def cohort_memberships(self, person_id: str, cohort_ids: Iterable[str]) -> FrozenSet[str]:
        ids = frozenset(cohort_ids)
        if not ids:
            return frozenset()
        return self._memo(
            ("cohorts", person_id, ids),
            lambda: frozenset(self._repo.find_cohort_memberships(person_id=person_id, cohort_ids=sorted(ids))),
        )

    def overrides(
        self, person_id: str, targets: Sequence[OverrideTarget], access: OverrideAccess
    ) -> Sequence[AccessOverride]:
        if not targets:
            return ()
        return self._memo(
            ("overrides", person_id, tuple(targets), access),
            lambda: tuple(
                self._repo.find_overrides(
                    org_id=self._org_id, person_id=person_id, targets=list(targets), access=access
                )
            ),
        )

    def has_attendance(self, person_id: str) -> bool:
        return self._memo(
            ("attendance", person_id),
            lambda: bool(self._repo.has_attendance_record(session_id=self._session_id, person_id=person_id)),
        )


@dataclass(frozen=True)
class SnapshotContext:
    """Fully loaded, in-memory evaluation context.

    Useful for callers that already hold the data and for deterministic tests.
    """

    session_row: Optional[Session] = None
    policies: Mapping[Tuple[PolicyScope, Optional[str]], Policy] = field(default_factory=dict)
    groups: Mapping[str, Group] = field(default_factory=dict)
    geofences: Mapping[str, Geofence] = field(default_factory=dict)
    person_links: Mapping[str, str] = field(default_factory=dict)
    scopes: Sequence[AttendanceScope] = ()
    assignments: SessionAssignments = field(default_factory=SessionAssignments)
    group_members: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    cohort_members: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    access_overrides: Sequence[AccessOverride] = ()
    checked_in: FrozenSet[str] = frozenset()

    def session(self) -> Optional[Session]:
        return self.session_row

    def policy(self, scope: PolicyScope, scope_id: Optional[str]) -> Optional[Policy]:
        return self.policies.get((scope, scope_id))

    def group(self, group_id: str) -> Optional[Group]:
        return self.groups.get(group_id)

    def geofence(self, location_id: str) -> Optional[Geofence]:
        return self.geofences.get(location_id)

    def linked_person_id(self, user_id: str) -> Optional[str]:
        return self.person_links.get(user_id)

    def attendance_scopes(self) -> Sequence[AttendanceScope]:
        return tuple(self.scopes)

    def session_assignments(self) -> SessionAssignments:
        return self.assignments

    def group_memberships(self, person_id: str, group_ids: Iterable[str]) -> FrozenSet[str]:
        return frozenset(group_ids) & frozenset(self.group_members.get(person_id, ()))

    def cohort_memberships(self, person_id: str, cohort_ids: Iterable[str]) -> FrozenSet[str]:
        return frozenset(cohort_ids) & frozenset(self.cohort_members.get(person_id, ()))

    def overrides(
        self, person_id: str, targets: Sequence[OverrideTarget], access: OverrideAccess
    ) -> Sequence[AccessOverride]:
        return tuple(
            o
            for o in self.access_overrides
            if o.person_id == person_id and o.access == access and any(t.matches(o) for t in targets)
        )

    def has_attendance(self, person_id: str) -> bool:
        return person_id in self.checked_in
