from __future__ import annotations

import json
from typing import Any, FrozenSet, Iterable, Optional, Sequence

from ..access.model import AccessOverride, AttendanceScope, OverrideTarget, PersonUserLink, SessionAssignments
from ..common.datetime_utils import as_utc
from ..core.enums import (
    EligibleSet,
    OverrideAccess,
    OverrideScope,
    PolicyMode,
    PolicyScope,
    ScopeType,
    SessionStatus,
)
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from ..policies.model import Group, Policy
from ..sessions.model import AllowedMethods, Geofence, Location, Session
from .repository import EligibilityRepository


def _json_field(value: Any) -> Optional[dict]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value.strip() else None
    return dict(value)


class MySQLEligibilityRepository(EligibilityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_session(self, *, org_id: str, session_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.org_id, s.name, s.start_at, s.end_at, s.status,
                       s.location_id, s.group_id, s.public_code, s.event_qr_token, s.allowed_methods,
                       l.lat, l.lng
                FROM sessions s
                LEFT JOIN locations l ON l.id = s.location_id
                WHERE s.id=%s AND s.org_id=%s
                """,
                (session_id, org_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            location = None
            if r.get("location_id"):
                location = Location(location_id=str(r["location_id"]), lat=r.get("lat"), lng=r.get("lng"))
            return Session(
                session_id=str(r["id"]),
                org_id=str(r["org_id"]),
                name=r["name"],
                start_at=as_utc(r["start_at"]),
                end_at=as_utc(r["end_at"]),
                status=SessionStatus(r["status"]),
                location=location,
                group_id=r.get("group_id"),
                public_code=r.get("public_code"),
                qr_token=r.get("event_qr_token"),
                allowed_methods=AllowedMethods.from_mapping(_json_field(r.get("allowed_methods"))),
            )

    def get_geofence(self, *, location_id: str) -> Optional[Geofence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT location_id, radius_m, type FROM geofences WHERE location_id=%s", (location_id,))
            r = fetchone(cur)
            if not r:
                return None
            radius = r.get("radius_m")
            return Geofence(
                location_id=str(r["location_id"]),
                radius_m=int(radius) if radius is not None else None,
                shape=r.get("type") or "circle",
            )

    def get_policy(self, *, org_id: str, scope: PolicyScope, scope_id: Optional[str]) -> Optional[Policy]:
        with db_cursor(self._conn_factory) as (_, cur):
            if scope_id is None:
                cur.execute(
                    """
                    SELECT mode, eligible_set, require_linked_user, require_geofence, require_event_code
                    FROM self_checkin_policies
                    WHERE org_id=%s AND scope_type=%s AND scope_id IS NULL
                    LIMIT 1
                    """,
                    (org_id, scope.value),
                )
            else:
                cur.execute(
                    """
                    SELECT mode, eligible_set, require_linked_user, require_geofence, require_event_code
                    FROM self_checkin_policies
                    WHERE org_id=%s AND scope_type=%s AND scope_id=%s
                    LIMIT 1
                    """,
                    (org_id, scope.value, scope_id),
                )
            r = fetchone(cur)
            if not r:
                return None
            return Policy(
                mode=PolicyMode(r["mode"]),
                eligible_set=EligibleSet(r.get("eligible_set") or EligibleSet.ALL_MEMBERS.value),
                require_linked_user=bool(r.get("require_linked_user")),
                require_geofence=bool(r.get("require_geofence")),
                require_event_code=bool(r.get("require_event_code")),
            )

    def get_group(self, *, group_id: str) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, self_checkin_enabled, self_checkin_mode, self_checkin_require_invite
                FROM `groups`
                WHERE id=%s
                """,
                (group_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            mode = r.get("self_checkin_mode")
            return Group(
                group_id=str(r["id"]),
                self_checkin_enabled=bool(r.get("self_checkin_enabled")),
                self_checkin_mode=PolicyMode(mode) if mode else None,
                self_checkin_require_invite=bool(r.get("self_checkin_require_invite")),
            )

    def list_attendance_scopes(self, *, event_id: str) -> Sequence[AttendanceScope]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT scope_type, scope_id FROM event_attendance_scopes WHERE event_id=%s", (event_id,))
            return [
                AttendanceScope(scope_type=ScopeType(r["scope_type"]), scope_id=r.get("scope_id"))
                for r in fetchall(cur)
            ]

    def get_session_assignments(self, *, session_id: str) -> SessionAssignments:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT person_id FROM session_people WHERE session_id=%s", (session_id,))
            people = frozenset(str(r["person_id"]) for r in fetchall(cur))
            cur.execute("SELECT group_id FROM session_groups WHERE session_id=%s", (session_id,))
            groups = frozenset(str(r["group_id"]) for r in fetchall(cur) if r.get("group_id"))
            return SessionAssignments(person_ids=people, group_ids=groups)

    def find_group_memberships(self, *, person_id: str, group_ids: Iterable[str]) -> FrozenSet[str]:
        ids = list(group_ids)
        if not ids:
            return frozenset()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT group_id FROM group_members WHERE person_id=%s AND group_id IN ({in_clause(ids)})",
                (person_id, *ids),
            )
            return frozenset(str(r["group_id"]) for r in fetchall(cur))

    def find_cohort_memberships(self, *, person_id: str, cohort_ids: Iterable[str]) -> FrozenSet[str]:
        ids = list(cohort_ids)
        if not ids:
            return frozenset()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT cohort_id FROM cohort_members WHERE person_id=%s AND cohort_id IN ({in_clause(ids)})",
                (person_id, *ids),
            )
            return frozenset(str(r["cohort_id"]) for r in fetchall(cur))

    def get_person_link(self, *, org_id: str, user_id: str) -> Optional[PersonUserLink]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT org_id, user_id, person_id FROM person_user_links WHERE org_id=%s AND user_id=%s LIMIT 1",
                (org_id, user_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PersonUserLink(org_id=str(r["org_id"]), user_id=str(r["user_id"]), person_id=str(r["person_id"]))

    def find_overrides(
        self,
        *,
        org_id: str,
        person_id: str,
        targets: Sequence[OverrideTarget],
        access: OverrideAccess,
    ) -> Sequence[AccessOverride]:
        if not targets:
            return []
        # One bound (scope_type AND scope_id) clause per target.
        pairs = " OR ".join(["(scope_type=%s AND scope_id=%s)"] * len(targets))
        params: list[object] = [org_id, person_id, access.value]
        for t in targets:
            params.extend([t.scope_type.value, t.scope_id])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, scope_type, scope_id, access, reason
                FROM self_checkin_access_overrides
                WHERE org_id=%s AND person_id=%s AND access=%s AND ({pairs})
                """,
                tuple(params),
            )
            return [
                AccessOverride(
                    person_id=str(r["person_id"]),
                    scope_type=OverrideScope(r["scope_type"]),
                    scope_id=str(r["scope_id"]),
                    access=OverrideAccess(r["access"]),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]

    def has_attendance_record(self, *, session_id: str, person_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM attendance_records WHERE session_id=%s AND person_id=%s LIMIT 1",
                (session_id, person_id),
            )
            return fetchone(cur) is not None
