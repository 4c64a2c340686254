from __future__ import annotations

from datetime import timedelta

from ...common.datetime_utils import as_utc
from ...core.enums import DenialReason, SessionStatus, Stage
from ..context import EvaluationContext
from ..model import EligibilityResult
from .base import EvaluationState, Gate, GateOutcome


class SessionLookupGate(Gate):
    stage = Stage.SESSION_LOOKUP

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        session = context.session()
        request = state.request
        if session is None or session.session_id != request.session_id or session.org_id != request.org_id:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.SESSION_NOT_FOUND))
        return GateOutcome.proceed(state.with_updates(session=session))


class MethodGate(Gate):
    stage = Stage.METHOD_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        if not state.session.allowed_methods.allows(state.request.method):
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.METHOD_DISABLED))
        return GateOutcome.proceed(state)


class StatusGate(Gate):
    stage = Stage.STATUS_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        if state.session.status == SessionStatus.CANCELLED:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.SESSION_CANCELLED))
        return GateOutcome.proceed(state)


class TimeWindowGate(Gate):
    """Open ``early_minutes`` before start, close ``late_minutes`` after end (inclusive)."""

    stage = Stage.TIME_WINDOW_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        now = as_utc(state.now)
        opens_at = as_utc(state.session.start_at) - timedelta(minutes=state.settings.early_minutes)
        closes_at = as_utc(state.session.end_at) + timedelta(minutes=state.settings.late_minutes)

        if now < opens_at:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.NOT_YET_OPEN))
        if now > closes_at:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.WINDOW_CLOSED))
        return GateOutcome.proceed(state)
