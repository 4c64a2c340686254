from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..core.enums import OverrideAccess, OverrideScope, ScopeType


@dataclass(frozen=True)
class AttendanceScope:
    scope_type: ScopeType
    scope_id: Optional[str] = None


@dataclass(frozen=True)
class SessionAssignments:
    person_ids: FrozenSet[str] = field(default_factory=frozenset)
    group_ids: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.person_ids and not self.group_ids


@dataclass(frozen=True)
class PersonUserLink:
    org_id: str
    user_id: str
    person_id: str


@dataclass(frozen=True)
class AccessOverride:
    """Per-person exception at a (scope_type, scope_id) pair."""

    person_id: str
    scope_type: OverrideScope
    scope_id: str
    access: OverrideAccess
    reason: Optional[str] = None


@dataclass(frozen=True)
class OverrideTarget:
    """A bound (scope_type, scope_id) pair; both halves must match together."""

    scope_type: OverrideScope
    scope_id: str

    def matches(self, override: AccessOverride) -> bool:
        return override.scope_type == self.scope_type and override.scope_id == self.scope_id
