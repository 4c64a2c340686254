from __future__ import annotations

import json

from ..core.exceptions import DuplicateAttendanceError, DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NewAttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_record(self, record: NewAttendanceRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(org_id, session_id, person_id, method, status, lat, lng, accuracy_m, meta)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.org_id,
                        record.session_id,
                        record.person_id,
                        record.method,
                        record.status,
                        record.lat,
                        record.lng,
                        record.accuracy_m,
                        json.dumps(record.meta),
                    ),
                )
                return int(cur.lastrowid)
        except DuplicateKeyError as exc:
            raise DuplicateAttendanceError(
                f"attendance already recorded for session={record.session_id} person={record.person_id}"
            ) from exc
