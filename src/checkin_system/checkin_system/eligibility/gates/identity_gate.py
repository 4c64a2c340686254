from __future__ import annotations

from ...core.enums import DenialReason, PolicyMode, Stage
from ..context import EvaluationContext
from ..model import EligibilityResult
from .base import EvaluationState, Gate, GateOutcome


class IdentityGate(Gate):
    """Map the caller to a person record.

    Authenticated mode ignores any caller-supplied person id and goes through
    the user -> person link; other modes trust the supplied person id.
    """

    stage = Stage.IDENTITY_RESOLVE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        request = state.request
        person_id = request.person_id

        if state.effective_policy.mode == PolicyMode.AUTHENTICATED:
            if not request.user_id:
                return GateOutcome.deny(
                    EligibilityResult.deny(DenialReason.LOGIN_REQUIRED, policy=state.snapshot, requires_login=True)
                )
            person_id = context.linked_person_id(request.user_id)
            if not person_id:
                return GateOutcome.deny(
                    EligibilityResult.deny(DenialReason.IDENTITY_UNLINKED, policy=state.snapshot, requires_invite=True)
                )

        if not person_id:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.UNRESOLVED_IDENTITY))
        return GateOutcome.proceed(state.with_updates(person_id=person_id))
