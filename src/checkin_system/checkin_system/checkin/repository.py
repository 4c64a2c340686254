from __future__ import annotations

from typing import Protocol

from .model import NewAttendanceRecord


class AttendanceRepository(Protocol):
    def create_record(self, record: NewAttendanceRecord) -> int:
        """Insert and return the new id.

        Raises ``DuplicateAttendanceError`` when (session, person) already exists.
        """

        raise NotImplementedError
