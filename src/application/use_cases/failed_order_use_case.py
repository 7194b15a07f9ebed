"""
Failed Order Use Case

Records checkouts that ended abnormally so a reviewer can reconcile
payment and order, and lets admins work through the log.
"""

import logging
from typing import List, Optional

from src.application.dtos.order_dtos import FailedOrderRequest, FailedOrderUpdateRequest
from src.domain.entities.failed_order import FailedOrder
from src.domain.repositories.failed_order_repository import FailedOrderRepository
from src.infrastructure.utilities.constants import FailedOrderStatus
from src.infrastructure.utilities.exceptions import FailedOrderNotFoundError, ValidationError
from src.infrastructure.utilities.helpers import sanitize_text


class FailedOrderUseCase:
    """Use case for the failed-order audit log"""

    def __init__(self, failed_order_repository: FailedOrderRepository):
        self._repository = failed_order_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def record(self, request: FailedOrderRequest) -> FailedOrder:
        """Append an audit record; a missing transaction id is synthesized"""
        if not isinstance(request.order_data, dict):
            raise ValidationError("orderData is required", field="orderData")
        error = sanitize_text(request.error, 2000)
        if not error:
            raise ValidationError("error is required", field="error")

        failed_order = FailedOrder(
            id=None,
            transaction_id=(request.transaction_id or "").strip(),
            order_data=request.order_data,
            error=error,
            error_details=request.error_details or {},
            user_id=request.user_id,
            user_email=request.user_email,
            user_name=request.user_name,
        )
        saved = await self._repository.add(failed_order)
        self._logger.warning(
            "⚠️ FAILED ORDER RECORDED: #%s transaction=%s user=%s amount=%s",
            saved.id, saved.transaction_id, saved.user_id, saved.amount,
        )
        return saved

    async def list_failed_orders(self, status: Optional[str] = None, query: Optional[str] = None) -> List[FailedOrder]:
        """Newest first, optionally filtered by status and free-text search"""
        if status and status not in FailedOrderStatus.ALL:
            raise ValidationError(f"Unknown status: {status}", field="status")
        records = await self._repository.list(status=status)
        if query:
            records = [record for record in records if record.matches(query)]
        return records

    async def update(self, request: FailedOrderUpdateRequest) -> FailedOrder:
        """Change review status and/or comment"""
        if request.status is None and request.comment is None:
            raise ValidationError("Nothing to update: provide status or comment")

        record = await self._repository.get_by_id(request.failed_order_id)
        if record is None:
            raise FailedOrderNotFoundError(request.failed_order_id)

        if request.status is not None:
            if request.status not in FailedOrderStatus.ALL:
                raise ValidationError(f"Unknown status: {request.status}", field="status")
            record.update_status(request.status)
        if request.comment is not None:
            record.update_comment(sanitize_text(request.comment, 2000))

        updated = await self._repository.update(record)
        self._logger.info("📝 FAILED ORDER #%s -> %s", updated.id, updated.status)
        return updated
