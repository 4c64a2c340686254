from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence, Tuple

from ..core.enums import PolicyMode, PolicyScope, PolicySource
from ..sessions.model import Session
from .model import DEFAULT_POLICY, EffectivePolicy, Group, Policy


class PolicyLookup(Protocol):
    def policy(self, scope: PolicyScope, scope_id: Optional[str]) -> Optional[Policy]: ...

    def group(self, group_id: str) -> Optional[Group]: ...


PolicyStep = Callable[[Session, PolicyLookup], Optional[Policy]]


def _session_policy(session: Session, lookup: PolicyLookup) -> Optional[Policy]:
    return lookup.policy(PolicyScope.SESSION, session.session_id)


def _group_policy(session: Session, lookup: PolicyLookup) -> Optional[Policy]:
    if not session.group_id:
        return None
    return lookup.policy(PolicyScope.GROUP, session.group_id)


def _group_legacy_flags(session: Session, lookup: PolicyLookup) -> Optional[Policy]:
    if not session.group_id:
        return None
    group = lookup.group(session.group_id)
    if group is None or not group.self_checkin_enabled:
        return None
    mode = group.self_checkin_mode or PolicyMode.PUBLIC_WITH_CODE
    if mode == PolicyMode.DISABLED:
        return None
    return Policy(
        mode=mode,
        eligible_set=DEFAULT_POLICY.eligible_set,
        require_linked_user=bool(group.self_checkin_require_invite),
        require_geofence=DEFAULT_POLICY.require_geofence,
        require_event_code=DEFAULT_POLICY.require_event_code,
    )


def _org_policy(session: Session, lookup: PolicyLookup) -> Optional[Policy]:
    return lookup.policy(PolicyScope.ORG, None)


POLICY_CASCADE: Sequence[Tuple[PolicySource, PolicyStep]] = (
    (PolicySource.SESSION, _session_policy),
    (PolicySource.GROUP, _group_policy),
    (PolicySource.GROUP_LEGACY, _group_legacy_flags),
    (PolicySource.ORG, _org_policy),
)


class PolicyResolver:
    """Cascade session -> group -> group legacy flags -> org -> default.

    The first step that yields a policy wins. Resolution is total: when no
    step applies the hard default (disabled) is returned.
    """

    def __init__(self, cascade: Sequence[Tuple[PolicySource, PolicyStep]] = POLICY_CASCADE):
        self._cascade = tuple(cascade)

    def resolve(self, session: Session, lookup: PolicyLookup) -> EffectivePolicy:
        for source, step in self._cascade:
            policy = step(session, lookup)
            if policy is not None:
                return EffectivePolicy(policy=policy, source=source)
        return EffectivePolicy(policy=DEFAULT_POLICY, source=PolicySource.DEFAULT)
