from __future__ import annotations

from typing import Protocol

from qrorder.domain.common.ids import UserId


class TokenDecoder(Protocol):
    def subject(self, token: str) -> UserId:
        """Return the user id a valid token was issued for, or raise InvalidTokenError."""
        ...


class InvalidTokenError(Exception):
    pass
