from __future__ import annotations

from ...access.model import OverrideTarget
from ...core.enums import DenialReason, OverrideAccess, OverrideScope, Stage
from ..context import EvaluationContext
from ..model import EligibilityResult
from .base import EvaluationState, Gate, GateOutcome


def deny_targets(session_id: str, group_id: str | None) -> list[OverrideTarget]:
    """Scopes a deny override may be attached to for this session.

    Each target is a bound (scope_type, scope_id) pair; a row matching only
    one half (e.g. a group override whose id happens to equal the session id)
    does not apply.
    """

    targets = [OverrideTarget(scope_type=OverrideScope.SESSION, scope_id=session_id)]
    if group_id:
        targets.append(OverrideTarget(scope_type=OverrideScope.GROUP, scope_id=group_id))
    return targets


class OverrideGate(Gate):
    stage = Stage.OVERRIDE_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        session = state.session
        targets = deny_targets(session.session_id, session.group_id)
        denies = context.overrides(state.person_id, targets, OverrideAccess.DENY)
        if not denies:
            return GateOutcome.proceed(state)

        # Session-level rows come first so their reason wins over the group's.
        denies = sorted(denies, key=lambda o: o.scope_type != OverrideScope.SESSION)
        reason = next((o.reason for o in denies if o.reason and o.reason.strip()), None)
        return GateOutcome.deny(EligibilityResult.deny(DenialReason.ACCESS_DENIED_BY_OVERRIDE, reason=reason))


class DuplicateGate(Gate):
    """Advisory only: the storage unique key is what actually prevents doubles."""

    stage = Stage.DUPLICATE_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        if context.has_attendance(state.person_id):
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.ALREADY_CHECKED_IN))
        return GateOutcome.proceed(state)
