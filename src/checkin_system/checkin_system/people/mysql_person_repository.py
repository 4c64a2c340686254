from __future__ import annotations

from typing import Optional

from ..core.enums import IdentifierType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Person
from .repository import PersonRepository

_SELECT = "SELECT id, org_id, full_name, email, phone, checkin_code, external_id, status FROM people"

_WHERE_BY_IDENTIFIER = {
    IdentifierType.PHONE: "phone=%s",
    IdentifierType.EMAIL: "LOWER(email)=LOWER(%s)",
    IdentifierType.CHECKIN_CODE: "checkin_code=%s",
    IdentifierType.EXTERNAL_ID: "external_id=%s",
}


def _to_person(r: dict) -> Person:
    return Person(
        person_id=str(r["id"]),
        org_id=str(r["org_id"]),
        full_name=r["full_name"],
        email=r.get("email"),
        phone=r.get("phone"),
        checkin_code=r.get("checkin_code"),
        external_id=r.get("external_id"),
        is_active=(r.get("status") or "active") == "active",
    )


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_identifier(self, *, org_id: str, identifier_type: IdentifierType, identifier: str) -> Optional[Person]:
        where = _WHERE_BY_IDENTIFIER[identifier_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE org_id=%s AND {where} LIMIT 1", (org_id, identifier))
            r = fetchone(cur)
            return _to_person(r) if r else None

    def find_active_by_checkin_code(self, *, org_id: str, checkin_code: str) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE org_id=%s AND checkin_code=%s AND status='active' LIMIT 1",
                (org_id, checkin_code),
            )
            r = fetchone(cur)
            return _to_person(r) if r else None
