"""
Catalog endpoint with translatable fields resolved per language
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import container_dependency
from src.application.use_cases.product_catalog_use_case import ProductCatalogRequest
from src.domain.value_objects.multilingual_text import DEFAULT_LANGUAGE
from src.infrastructure.container.dependency_injection import DependencyContainer

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(
    lang: str = Query(default=DEFAULT_LANGUAGE),
    container: DependencyContainer = Depends(container_dependency),
):
    use_case = container.get_product_catalog_use_case()
    response = await use_case.list_products(ProductCatalogRequest(language=lang))
    return response.to_dict()
