from __future__ import annotations

from ...access.model import OverrideTarget
from ...core.enums import DenialReason, EligibleSet, OverrideAccess, OverrideScope, ScopeType, Stage
from ..context import EvaluationContext
from ..model import EligibilityResult
from .base import EvaluationState, Gate, GateOutcome


class ScopeMatchGate(Gate):
    """Event attendance scopes: no rows means unrestricted; one match is enough."""

    stage = Stage.SCOPE_MATCH

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        scopes = context.attendance_scopes()
        if not scopes or self._matches(state.person_id, scopes, context):
            return GateOutcome.proceed(state)
        return GateOutcome.deny(EligibilityResult.deny(DenialReason.NOT_IN_EVENT_SCOPE))

    @staticmethod
    def _matches(person_id: str, scopes, context: EvaluationContext) -> bool:
        if any(s.scope_type == ScopeType.ORG for s in scopes):
            return True
        if any(s.scope_type == ScopeType.PERSON and s.scope_id == person_id for s in scopes):
            return True

        group_ids = {s.scope_id for s in scopes if s.scope_type == ScopeType.GROUP and s.scope_id}
        if group_ids and context.group_memberships(person_id, group_ids):
            return True

        cohort_ids = {s.scope_id for s in scopes if s.scope_type == ScopeType.COHORT and s.scope_id}
        return bool(cohort_ids) and bool(context.cohort_memberships(person_id, cohort_ids))


class AssignmentMatchGate(Gate):
    """Explicit session assignments (people and groups), layered under scopes."""

    stage = Stage.ASSIGNMENT_MATCH

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        assignments = context.session_assignments()
        if assignments.is_empty or state.person_id in assignments.person_ids:
            return GateOutcome.proceed(state)
        if assignments.group_ids and context.group_memberships(state.person_id, assignments.group_ids):
            return GateOutcome.proceed(state)
        return GateOutcome.deny(EligibilityResult.deny(DenialReason.NOT_ASSIGNED_TO_SESSION))


class GroupMembershipGate(Gate):
    """When the session belongs to a group, ``all_members`` policies admit members only.

    An explicit ``allow`` override at the group's scope lets a non-member in.
    """

    stage = Stage.GROUP_MEMBERSHIP_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        group_id = state.session.group_id
        if not group_id or state.effective_policy.policy.eligible_set != EligibleSet.ALL_MEMBERS:
            return GateOutcome.proceed(state)

        if context.group_memberships(state.person_id, {group_id}):
            return GateOutcome.proceed(state)

        target = OverrideTarget(scope_type=OverrideScope.GROUP, scope_id=group_id)
        if context.overrides(state.person_id, [target], OverrideAccess.ALLOW):
            return GateOutcome.proceed(state)
        return GateOutcome.deny(EligibilityResult.deny(DenialReason.NOT_GROUP_MEMBER))
