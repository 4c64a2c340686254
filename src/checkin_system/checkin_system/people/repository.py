from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import IdentifierType
from .model import Person


class PersonRepository(Protocol):
    def find_by_identifier(self, *, org_id: str, identifier_type: IdentifierType, identifier: str) -> Optional[Person]:
        """Email matches case-insensitively; other identifiers match exactly."""

        raise NotImplementedError

    def find_active_by_checkin_code(self, *, org_id: str, checkin_code: str) -> Optional[Person]:
        raise NotImplementedError
