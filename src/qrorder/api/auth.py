from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from qrorder.application.errors import AuthenticationError
from qrorder.application.use_cases.resolve_tenant import ResolveTenantContext
from qrorder.domain.identity.entities import TenantContext
from qrorder.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from qrorder.infrastructure.security.jwt_tokens import JwtTokenCodec

bearer_scheme = HTTPBearer(auto_error=False)


def _resolve_tenant_use_case() -> ResolveTenantContext:
    return ResolveTenantContext(
        user_repository=SqlAlchemyUserRepository(),
        token_decoder=JwtTokenCodec(),
    )


def require_tenant(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TenantContext:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("access denied, no token provided")
    return _resolve_tenant_use_case().execute(credentials.credentials)


def optional_tenant(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TenantContext | None:
    """Anonymous callers get None; a presented token must still be valid."""
    if credentials is None or not credentials.credentials:
        return None
    return _resolve_tenant_use_case().execute(credentials.credentials)
