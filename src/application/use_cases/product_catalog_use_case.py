"""
Product catalog use case

Lists the active catalog with translatable fields resolved for the
requested language.
"""

import logging
from dataclasses import dataclass, field

from src.domain.repositories.product_repository import ProductRepository
from src.domain.value_objects.multilingual_text import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES


@dataclass
class ProductCatalogRequest:
    """Request for product catalog operations"""

    language: str = DEFAULT_LANGUAGE


@dataclass
class ProductCatalogResponse:
    """Response for product catalog operations"""

    language: str
    products: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"language": self.language, "products": self.products}


class ProductCatalogUseCase:
    """Use case for product catalog operations"""

    def __init__(self, product_repository: ProductRepository):
        self._product_repository = product_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_products(self, request: ProductCatalogRequest) -> ProductCatalogResponse:
        """Active products rendered in the request language"""
        language = request.language if request.language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE
        products = await self._product_repository.find_all_active()
        self._logger.info("📦 CATALOG: %d products in %s", len(products), language)
        return ProductCatalogResponse(
            language=language,
            products=[product.to_dict(language) for product in products],
        )
