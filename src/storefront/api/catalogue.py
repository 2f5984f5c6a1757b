"""Public catalogue routes — product browsing and categories."""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import Page, paging
from storefront.api.schemas import CategoryResponse, PageMeta, ProductListResponse, ProductResponse
from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.errors import NotFound

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    category_id: str | None = None,
    featured: bool | None = None,
    min_price: int | None = Query(default=None, ge=0),
    max_price: int | None = Query(default=None, ge=0),
    q: str | None = Query(default=None, max_length=100),
    sort: Literal["newest", "oldest", "price_asc", "price_desc", "name"] = "newest",
    page: Page = Depends(paging),
) -> ProductListResponse:
    products, total = current_domain.repository_for(Product).search(
        category_id=category_id,
        featured=featured,
        min_price=min_price,
        max_price=max_price,
        name=q,
        sort=sort,
        page=page.page,
        limit=page.limit,
    )
    return ProductListResponse(
        products=[ProductResponse.from_product(p) for p in products],
        pagination=PageMeta.build(page.page, page.limit, total),
    )


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product)._dao.query.filter(id=product_id, is_active=True).all().first
    if product is None:
        raise NotFound(f"Product {product_id} not found")
    return ProductResponse.from_product(product)


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    return [CategoryResponse.from_category(c) for c in current_domain.repository_for(Category).active()]
