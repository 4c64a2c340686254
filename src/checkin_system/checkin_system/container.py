from __future__ import annotations

from dataclasses import dataclass

from .checkin.mysql_attendance_repository import MySQLAttendanceRepository
from .checkin.repository import AttendanceRepository
from .checkin.service import CheckinService
from .database.connection import DBConfig, DatabaseConnection
from .eligibility.mysql_eligibility_repository import MySQLEligibilityRepository
from .eligibility.repository import EligibilityRepository
from .eligibility.service import EligibilityEngine, EligibilityService
from .eligibility.settings import EngineSettings
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import PersonRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository


@dataclass(frozen=True)
class Container:
    eligibility_repo: EligibilityRepository
    people_repo: PersonRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository

    eligibility_service: EligibilityService
    checkin_service: CheckinService


def wire(
    *,
    eligibility_repo: EligibilityRepository,
    people_repo: PersonRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    engine_settings: EngineSettings | None = None,
) -> Container:
    """Assemble services over any repository implementations (MySQL or in-memory)."""

    eligibility_service = EligibilityService(
        eligibility_repo,
        engine=EligibilityEngine(settings=engine_settings or EngineSettings()),
    )
    checkin_service = CheckinService(eligibility_service, attendance_repo, people_repo, sessions_repo)

    return Container(
        eligibility_repo=eligibility_repo,
        people_repo=people_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        eligibility_service=eligibility_service,
        checkin_service=checkin_service,
    )


def build_container(*, db_config: dict, engine_settings: EngineSettings | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        eligibility_repo=MySQLEligibilityRepository(conn),
        people_repo=MySQLPersonRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        engine_settings=engine_settings,
    )
