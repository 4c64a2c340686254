from __future__ import annotations

from ...core.enums import DenialReason, PolicyMode, Stage
from ...policies.resolver import PolicyResolver
from ..context import EvaluationContext
from ..model import EligibilityResult
from .base import EvaluationState, Gate, GateOutcome


class PolicyResolveGate(Gate):
    stage = Stage.POLICY_RESOLVE

    def __init__(self, resolver: PolicyResolver | None = None):
        self._resolver = resolver or PolicyResolver()

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        effective = self._resolver.resolve(state.session, context)
        return GateOutcome.proceed(state.with_updates(effective_policy=effective))


class PolicyDisabledGate(Gate):
    stage = Stage.POLICY_DISABLED_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        if state.effective_policy.mode == PolicyMode.DISABLED:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.POLICY_DISABLED, policy=state.snapshot))
        return GateOutcome.proceed(state)
