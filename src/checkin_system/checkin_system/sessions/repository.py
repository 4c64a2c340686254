from __future__ import annotations

from typing import Optional, Protocol


class SessionRepository(Protocol):
    """Resolve the session a public caller means from what they typed or scanned."""

    def find_id_by_public_code(self, *, org_id: str, public_code: str) -> Optional[str]:
        """Case-insensitive match on the session's public code."""

        raise NotImplementedError

    def find_id_by_qr_token(self, *, org_id: str, qr_token: str) -> Optional[str]:
        raise NotImplementedError
