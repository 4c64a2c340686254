from __future__ import annotations

from ...core.enums import CheckinMethod, DenialReason, PolicyMode, Stage
from ..context import EvaluationContext
from ..model import EligibilityResult
from .base import EvaluationState, Gate, GateOutcome


class CodeGate(Gate):
    """Proof of presence by event code or QR token (public_with_code mode).

    Kiosk check-ins are exempt; ``geo`` is exempt because the geofence stands
    in for code possession.
    """

    stage = Stage.CODE_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        request = state.request
        policy = state.effective_policy.policy
        if (
            request.method == CheckinMethod.KIOSK
            or not policy.require_event_code
            or policy.mode != PolicyMode.PUBLIC_WITH_CODE
        ):
            return GateOutcome.proceed(state)

        session = state.session
        if request.method == CheckinMethod.EVENT_CODE and request.event_code:
            expected = (session.public_code or "").upper()
            if not expected or request.event_code.upper() != expected:
                return GateOutcome.deny(EligibilityResult.deny(DenialReason.INVALID_EVENT_CODE))
        elif request.method == CheckinMethod.QR and request.qr_token:
            if not session.qr_token or request.qr_token != session.qr_token:
                return GateOutcome.deny(EligibilityResult.deny(DenialReason.INVALID_QR_TOKEN))
        elif request.method != CheckinMethod.GEO:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.CODE_REQUIRED))
        return GateOutcome.proceed(state)
