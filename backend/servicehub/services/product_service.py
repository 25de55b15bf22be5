"""
ServiceHub Backend — Product Service
======================================

What:  Stocked products held at the tenant's locations.

List options:
    search          contains-match over name and SKU
    location_id     exact match
    low_stock       True → only stock_quantity <= low_stock_threshold;
                    False or absent → no stock restriction

Updates change everything except the location a product is held at.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.exceptions import NotFoundError
from servicehub.models.location import Location
from servicehub.models.product import Product
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.product import ProductResponse, ProductWrite
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import (
    FieldFilter,
    QueryCriteria,
    SortKey,
    TenantRepository,
    TextSearch,
)
from servicehub.services.tax import round_money
from servicehub.services.validators import ensure_valid, validate_product
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

locations = TenantRepository(Location)


def to_product_response(product: Product) -> ProductResponse:
    return ProductResponse.model_validate(product)


class ProductService:
    repository = TenantRepository(Product)

    async def list_products(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        search: Optional[str] = None,
        location_id: Optional[uuid.UUID] = None,
        low_stock: Optional[bool] = None,
    ) -> ApiResponse:
        criteria = QueryCriteria(
            filters=[
                FieldFilter("location_id", location_id),
                FieldFilter(
                    "stock_quantity",
                    "low_stock_threshold" if low_stock else None,
                    op="le_field",
                ),
            ],
            search=TextSearch(term=search, fields=("name", "sku")),
            sort=SortKey("name"),
        )
        return await fetch_tenant_page(
            db, ctx, self.repository, criteria, page, to_product_response
        )

    async def load(self, db: AsyncSession, ctx: RequestContext, product_id: uuid.UUID) -> Product:
        product = await self.repository.get(db, ctx.tenant_id, product_id)
        if product is None:
            raise NotFoundError(resource="Product", resource_id=str(product_id))
        return product

    async def get_product(
        self, db: AsyncSession, ctx: RequestContext, product_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get product")
        return ApiResponse.ok(to_product_response(await self.load(db, ctx, product_id)))

    @staticmethod
    def _apply(product: Product, data: ProductWrite) -> None:
        product.name = data.name.strip()
        product.description = data.description
        product.sku = data.sku
        product.category = data.category
        product.unit_price = round_money(data.unit_price)
        product.cost_price = round_money(data.cost_price)
        product.stock_quantity = data.stock_quantity
        product.low_stock_threshold = data.low_stock_threshold
        product.unit = data.unit
        product.is_active = data.is_active

    async def create_product(
        self, db: AsyncSession, ctx: RequestContext, data: ProductWrite
    ) -> ApiResponse:
        """
        Add a product at one of the tenant's locations.

        Raises:
            ValidationError: missing name or location, negative prices or stock
            NotFoundError: location missing from the tenant
        """
        if not ctx.has_tenant:
            return tenant_missing("Create product")
        ensure_valid(validate_product(data))

        location = await locations.get(db, ctx.tenant_id, data.location_id)
        if location is None:
            raise NotFoundError(resource="Location", resource_id=str(data.location_id))

        product = Product(location_id=location.id)
        self._apply(product, data)
        await self.repository.add(db, ctx.tenant_id, product)
        logger.info("Product %s created at location %s", product.id, location.id)
        return ApiResponse.ok(to_product_response(product), "Product created successfully")

    async def update_product(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        product_id: uuid.UUID,
        data: ProductWrite,
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Update product")
        product = await self.load(db, ctx, product_id)
        ensure_valid(validate_product(data, creating=False))

        self._apply(product, data)
        await self.repository.save(db, product)
        logger.info("Product %s updated", product.id)
        return ApiResponse.ok(to_product_response(product), "Product updated successfully")

    async def delete_product(
        self, db: AsyncSession, ctx: RequestContext, product_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Delete product")
        product = await self.load(db, ctx, product_id)
        await self.repository.soft_delete(db, product)
        logger.info("Product %s deleted", product.id)
        return ApiResponse.ok(True, "Product deleted successfully")


product_service = ProductService()
