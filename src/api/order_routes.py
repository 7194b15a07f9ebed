"""
Order endpoints: order creation and the failed-order audit log
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import CurrentUser, container_dependency, get_current_user, require_admin
from src.api.schemas import CreateOrderBody, FailedOrderBody, FailedOrderUpdateBody
from src.application.dtos.order_dtos import FailedOrderUpdateRequest
from src.infrastructure.container.dependency_injection import DependencyContainer

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("/create", status_code=201)
async def create_order(
    body: CreateOrderBody,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(container_dependency),
):
    use_case = container.get_order_creation_use_case()
    response = await use_case.create_order(body.to_request(user.uid, user.email))
    return response.to_dict()


@router.post("/failed", status_code=201)
async def log_failed_order(
    body: FailedOrderBody,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(container_dependency),
):
    use_case = container.get_failed_order_use_case()
    record = await use_case.record(body.to_request(user.uid, user.email, user.name))
    return {
        "id": record.id,
        "transactionId": record.transaction_id,
        "message": "Failed order logged successfully",
    }


@router.get("/failed")
async def list_failed_orders(
    status: Optional[str] = Query(default=None),
    q: Optional[str] = Query(default=None),
    _admin: CurrentUser = Depends(require_admin),
    container: DependencyContainer = Depends(container_dependency),
):
    use_case = container.get_failed_order_use_case()
    records = await use_case.list_failed_orders(status=status, query=q)
    return {"failedOrders": [record.to_dict() for record in records], "count": len(records)}


@router.patch("/failed/{failed_order_id}")
async def update_failed_order(
    failed_order_id: int,
    body: FailedOrderUpdateBody,
    _admin: CurrentUser = Depends(require_admin),
    container: DependencyContainer = Depends(container_dependency),
):
    use_case = container.get_failed_order_use_case()
    record = await use_case.update(
        FailedOrderUpdateRequest(failed_order_id=failed_order_id, status=body.status, comment=body.comment)
    )
    return record.to_dict()
