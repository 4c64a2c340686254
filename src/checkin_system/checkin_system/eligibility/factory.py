from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ..policies.resolver import PolicyResolver
from .gates.base import Gate
from .gates.code_gate import CodeGate
from .gates.geofence_gate import GeofenceGate
from .gates.identity_gate import IdentityGate
from .gates.override_gate import DuplicateGate, OverrideGate
from .gates.policy_gate import PolicyDisabledGate, PolicyResolveGate
from .gates.scope_gate import AssignmentMatchGate, GroupMembershipGate, ScopeMatchGate
from .gates.window_gate import MethodGate, SessionLookupGate, StatusGate, TimeWindowGate


@dataclass
class GatePipelineFactory:
    """Factory Pattern: the ordered gate list is the eligibility state machine."""

    resolver: PolicyResolver = field(default_factory=PolicyResolver)

    def build(self) -> Sequence[Gate]:
        return (
            SessionLookupGate(),
            MethodGate(),
            StatusGate(),
            TimeWindowGate(),
            PolicyResolveGate(self.resolver),
            PolicyDisabledGate(),
            GeofenceGate(),
            CodeGate(),
            IdentityGate(),
            ScopeMatchGate(),
            AssignmentMatchGate(),
            GroupMembershipGate(),
            OverrideGate(),
            DuplicateGate(),
        )
