from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import SessionRepository


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_id_by_public_code(self, *, org_id: str, public_code: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM sessions WHERE org_id=%s AND UPPER(public_code)=UPPER(%s) LIMIT 1",
                (org_id, public_code),
            )
            r = fetchone(cur)
            return str(r["id"]) if r else None

    def find_id_by_qr_token(self, *, org_id: str, qr_token: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM sessions WHERE org_id=%s AND event_qr_token=%s LIMIT 1",
                (org_id, qr_token),
            )
            r = fetchone(cur)
            return str(r["id"]) if r else None
