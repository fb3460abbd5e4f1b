from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import jwt

from qrorder.application.ports.tokens import InvalidTokenError, TokenDecoder
from qrorder.domain.common.ids import UserId

_DEV_SECRET = "qrorder-dev-secret-change-me"


def _jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if secret:
        return secret
    if os.getenv("APP_ENV", "dev").lower() in {"dev", "test"}:
        return _DEV_SECRET
    raise RuntimeError("JWT_SECRET is not set")


def _access_token_ttl() -> timedelta:
    return timedelta(minutes=int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", "1440")))


class JwtTokenCodec(TokenDecoder):
    def __init__(self, secret: str | None = None, algorithm: str | None = None) -> None:
        self._secret = secret or _jwt_secret()
        self._algorithm = algorithm or os.getenv("JWT_ALGORITHM", "HS256")

    def issue(self, user_id: UserId, ttl: timedelta | None = None) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + (ttl if ttl is not None else _access_token_ttl()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def subject(self, token: str) -> UserId:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("invalid token") from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("token has no subject")
        return UserId(subject)


def issue_access_token(user_id: str) -> str:
    return JwtTokenCodec().issue(UserId(user_id))
