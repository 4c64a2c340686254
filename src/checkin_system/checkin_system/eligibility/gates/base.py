from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ...core.enums import Stage
from ...policies.model import EffectivePolicy, PolicySnapshot
from ...sessions.model import Session
from ..context import EvaluationContext
from ..model import EligibilityRequest, EligibilityResult
from ..settings import EngineSettings


@dataclass(frozen=True)
class EvaluationState:
    """What earlier stages have established; each stage may add to it."""

    request: EligibilityRequest
    now: datetime
    settings: EngineSettings
    session: Optional[Session] = None
    effective_policy: Optional[EffectivePolicy] = None
    person_id: Optional[str] = None

    @property
    def snapshot(self) -> Optional[PolicySnapshot]:
        if self.effective_policy is None:
            return None
        return PolicySnapshot.of(self.effective_policy.policy)

    def with_updates(self, **changes) -> "EvaluationState":
        return replace(self, **changes)


@dataclass(frozen=True)
class GateOutcome:
    state: Optional[EvaluationState] = None
    denial: Optional[EligibilityResult] = None

    @classmethod
    def proceed(cls, state: EvaluationState) -> "GateOutcome":
        return cls(state=state)

    @classmethod
    def deny(cls, result: EligibilityResult) -> "GateOutcome":
        return cls(denial=result)


class Gate(ABC):
    """Strategy Pattern: one stage of the eligibility state machine."""

    stage: Stage

    @abstractmethod
    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        raise NotImplementedError
