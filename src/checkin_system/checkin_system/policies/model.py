from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EligibleSet, PolicyMode, PolicySource


@dataclass(frozen=True)
class Policy:
    mode: PolicyMode = PolicyMode.DISABLED
    eligible_set: EligibleSet = EligibleSet.ALL_MEMBERS
    require_linked_user: bool = False
    require_geofence: bool = True
    require_event_code: bool = True


DEFAULT_POLICY = Policy()


@dataclass(frozen=True)
class Group:
    """Only the legacy self check-in columns of a group matter here."""

    group_id: str
    self_checkin_enabled: bool = False
    self_checkin_mode: Optional[PolicyMode] = None
    self_checkin_require_invite: bool = False


@dataclass(frozen=True)
class EffectivePolicy:
    policy: Policy
    source: PolicySource

    @property
    def mode(self) -> PolicyMode:
        return self.policy.mode


@dataclass(frozen=True)
class PolicySnapshot:
    mode: PolicyMode
    require_geofence: bool
    require_event_code: bool
    require_linked_user: bool

    @classmethod
    def of(cls, policy: Policy) -> "PolicySnapshot":
        return cls(
            mode=policy.mode,
            require_geofence=policy.require_geofence,
            require_event_code=policy.require_event_code,
            require_linked_user=policy.require_linked_user,
        )

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "requireGeofence": self.require_geofence,
            "requireEventCode": self.require_event_code,
            "requireLinkedUser": self.require_linked_user,
        }
