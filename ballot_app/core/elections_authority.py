from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from django.conf import settings

from core.elections_errors import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminAuthority:
    """The single principal allowed to run lifecycle and approval operations.

    Fixed when the election system is constructed; there is no transfer.
    """

    principal: str

    def __post_init__(self) -> None:
        if not self.principal.strip():
            raise ValueError("admin principal must not be empty")

    @classmethod
    def from_settings(cls) -> AdminAuthority:
        return cls(principal=str(settings.ELECTION_ADMIN_PRINCIPAL).strip().lower())

    def is_admin(self, caller: str | None) -> bool:
        candidate = str(caller or "").strip().lower()
        if not candidate:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self.principal.encode("utf-8"))

    def require(self, *, caller: str | None, action: str) -> None:
        if self.is_admin(caller):
            return
        logger.warning("Privileged election action rejected action=%s caller=%s", action, caller or "<anonymous>")
        raise UnauthorizedError(f"Only the election administrator may {action}")
