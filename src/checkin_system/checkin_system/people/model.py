from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Person:
    """Domain entity: someone who can attend sessions."""

    person_id: str
    org_id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    checkin_code: Optional[str] = None
    external_id: Optional[str] = None
    is_active: bool = True
