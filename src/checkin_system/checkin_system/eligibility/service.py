from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from .context import EvaluationContext, RepositoryContext
from .factory import GatePipelineFactory
from .gates.base import EvaluationState, Gate
from .model import EligibilityRequest, EligibilityResult
from .repository import EligibilityRepository
from .settings import EngineSettings

logger = logging.getLogger(__name__)


class EligibilityEngine:
    """Walks the gates in order and stops at the first denial.

    Pure over its context: nothing is written, and a repository failure
    propagates as an exception instead of becoming a denial.
    """

    def __init__(
        self,
        *,
        settings: EngineSettings | None = None,
        factory: GatePipelineFactory | None = None,
    ):
        self._settings = settings or EngineSettings()
        self._gates: Sequence[Gate] = (factory or GatePipelineFactory()).build()

    def evaluate(self, request: EligibilityRequest, context: EvaluationContext, *, now: datetime) -> EligibilityResult:
        state = EvaluationState(request=request, now=now, settings=self._settings)
        for gate in self._gates:
            outcome = gate.evaluate(state, context)
            if outcome.denial is not None:
                logger.debug("session=%s stage=%s denied (%s)", request.session_id, gate.stage.value, outcome.denial.code.value)
                return outcome.denial
            state = outcome.state
            logger.debug("session=%s stage=%s passed", request.session_id, gate.stage.value)

        return EligibilityResult.allow(person_id=state.person_id, policy=state.snapshot)


class EligibilityService:
    """Use case: decide whether one self check-in attempt may succeed."""

    def __init__(
        self,
        repo: EligibilityRepository,
        *,
        engine: EligibilityEngine | None = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._repo = repo
        self._engine = engine or EligibilityEngine()
        self._clock = clock

    def check(self, request: EligibilityRequest, *, now: Optional[datetime] = None) -> EligibilityResult:
        context = RepositoryContext(self._repo, org_id=request.org_id, session_id=request.session_id)
        result = self._engine.evaluate(request, context, now=now or self._clock())
        logger.info(
            "self check-in eligibility session=%s method=%s allowed=%s code=%s",
            request.session_id,
            request.method.value,
            result.allowed,
            result.code.value,
        )
        return result

    def check_snapshot(
        self, request: EligibilityRequest, context: EvaluationContext, *, now: Optional[datetime] = None
    ) -> EligibilityResult:
        """Same decision over a context the caller has already loaded."""
        return self._engine.evaluate(request, context, now=now or self._clock())
