from __future__ import annotations

import logging

from qrorder.application.errors import AuthenticationError, TenantAccessDeniedError
from qrorder.application.ports.repositories import UserRepository
from qrorder.application.ports.tokens import InvalidTokenError, TokenDecoder
from qrorder.domain.identity.entities import CallerRole, TenantContext, UnscopedOperatorError

logger = logging.getLogger(__name__)


class ResolveTenantContext:
    def __init__(self, user_repository: UserRepository, token_decoder: TokenDecoder) -> None:
        self._user_repository = user_repository
        self._token_decoder = token_decoder

    def execute(self, token: str) -> TenantContext:
        if not token:
            raise AuthenticationError("access denied, no token provided")

        try:
            user_id = self._token_decoder.subject(token)
        except InvalidTokenError as exc:
            raise AuthenticationError(str(exc)) from exc

        account = self._user_repository.get(user_id)
        if account is None:
            raise AuthenticationError("user not found")
        if not account.is_active:
            logger.info("tenant_rejected_inactive", extra={"user_id": str(user_id)})
            raise AuthenticationError("account is deactivated")

        restaurant_id = account.restaurant_id if account.role == CallerRole.OPERATOR else None
        try:
            return TenantContext(
                caller_id=account.user_id,
                role=account.role,
                restaurant_id=restaurant_id,
            )
        except UnscopedOperatorError as exc:
            logger.warning("tenant_rejected_unscoped_operator", extra={"user_id": str(user_id)})
            raise TenantAccessDeniedError(
                "restaurant operator account is not bound to a restaurant"
            ) from exc
