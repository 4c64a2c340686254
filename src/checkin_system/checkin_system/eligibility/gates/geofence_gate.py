from __future__ import annotations

from ...common.geo import distance_meters
from ...core.enums import DenialReason, Stage
from ..context import EvaluationContext
from ..model import REASON_MESSAGES, EligibilityResult
from .base import EvaluationState, Gate, GateOutcome


class GeofenceGate(Gate):
    """Proximity check, only when the effective policy requires a geofence."""

    stage = Stage.GEOFENCE_GATE

    def evaluate(self, state: EvaluationState, context: EvaluationContext) -> GateOutcome:
        if not state.effective_policy.policy.require_geofence:
            return GateOutcome.proceed(state)

        caller = state.request.coordinate
        if caller is None:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.LOCATION_REQUIRED, policy=state.snapshot))

        location = state.session.location
        target = location.coordinate if location else None
        if target is None:
            return GateOutcome.deny(EligibilityResult.deny(DenialReason.LOCATION_NOT_CONFIGURED))

        radius = self._radius(state, context, location.location_id)
        distance = distance_meters(caller, target)
        if distance > radius:
            rounded = int(round(distance))
            reason = REASON_MESSAGES[DenialReason.OUT_OF_RANGE].format(distance=rounded, radius=radius)
            return GateOutcome.deny(
                EligibilityResult.deny(
                    DenialReason.OUT_OF_RANGE,
                    reason=reason,
                    policy=state.snapshot,
                    distance_meters=rounded,
                    geofence_radius=radius,
                )
            )
        return GateOutcome.proceed(state)

    @staticmethod
    def _radius(state: EvaluationState, context: EvaluationContext, location_id: str) -> int:
        geofence = context.geofence(location_id)
        # A missing, zero or negative radius falls back to the default.
        if geofence is None or not geofence.radius_m or geofence.radius_m <= 0:
            return state.settings.default_radius_m
        return int(geofence.radius_m)
