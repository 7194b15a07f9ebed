"""
Payment endpoints: server-side total calculation and payment verification
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import CurrentUser, container_dependency, get_current_user
from src.api.schemas import CalculateTotalBody, ProcessPaymentBody
from src.infrastructure.container.dependency_injection import DependencyContainer

router = APIRouter(prefix="/api/payment", tags=["payment"])


@router.post("/calculate-total")
async def calculate_total(
    body: CalculateTotalBody,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(container_dependency),
):
    """Price the cart from stored data; never consumes coupons"""
    use_case = container.get_total_calculation_use_case()
    response = await use_case.execute(body.to_request(user.uid))
    return response.to_dict()


@router.post("/process")
async def process_payment(
    body: ProcessPaymentBody,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(container_dependency),
):
    """Verify a provider payment against the recomputed total"""
    use_case = container.get_payment_verification_use_case()
    response = await use_case.execute(body.to_request(user.uid, user.email))
    return response.to_dict()
