from __future__ import annotations

from qrorder.application.dto.responses import OrderResponse
from qrorder.application.mappers.order_mapper import to_order_response
from qrorder.application.ports.repositories import OrderRepository
from qrorder.application.use_cases.tenancy import load_owned_order, require_operator
from qrorder.domain.common.ids import OrderId
from qrorder.domain.identity.entities import TenantContext


class GetOrder:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, tenant: TenantContext | None, order_id: OrderId) -> OrderResponse:
        operator = require_operator(tenant)
        order = load_owned_order(self._order_repository, operator, order_id)
        return to_order_response(order)
