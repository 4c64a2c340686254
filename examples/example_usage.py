"""Example: ask the eligibility engine directly (no Flask).

Controllers stay thin; the decision lives in the service layer.
Usage: python -m examples.example_usage <org_id> <session_id> <person_id> [lat lng]
"""

import importlib
import json
import sys

from dotenv import load_dotenv

from config import get_settings_module

from src.checkin_system.checkin_system.container import build_container
from src.checkin_system.checkin_system.core.enums import CheckinMethod
from src.checkin_system.checkin_system.eligibility.model import EligibilityRequest
from src.checkin_system.checkin_system.eligibility.settings import EngineSettings


def main(argv: list[str]) -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        engine_settings=EngineSettings.from_settings(settings),
    )

    org_id, session_id, person_id = argv[:3]
    lat, lng = (float(argv[3]), float(argv[4])) if len(argv) >= 5 else (None, None)

    result = container.eligibility_service.check(
        EligibilityRequest(
            org_id=org_id,
            session_id=session_id,
            method=CheckinMethod.GEO,
            person_id=person_id,
            lat=lat,
            lng=lng,
        )
    )
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main(sys.argv[1:])
