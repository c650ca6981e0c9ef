"""
FastAPI router for the product catalog.

All routes delegate to use cases. No business logic here.
Static paths are declared before `/{product_id}` so they match first.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from papertrade.application.audit_trail import RequestContext
from papertrade.application.trading.catalog import (
    CreateProductUseCase,
    GetProductUseCase,
    ListProductsByCategoryUseCase,
    ListProductsUseCase,
    SearchProductsUseCase,
    UpdateProductPriceUseCase,
)
from papertrade.application.trading.dtos import CreateProductCommand
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.dependencies import (
    get_optional_user,
    get_request_context,
    require_admin,
)
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok
from papertrade.interfaces.trading.dependencies import (
    get_create_product_use_case,
    get_list_products_use_case,
    get_product_use_case,
    get_products_by_category_use_case,
    get_search_products_use_case,
    get_update_product_price_use_case,
)
from papertrade.interfaces.trading.schemas import (
    CreateProductRequest,
    ProductData,
    ProductDetailSchema,
    ProductSchema,
    ProductsData,
    UpdatePriceRequest,
)

router = APIRouter(prefix="/products", tags=["products"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=Envelope[ProductsData],
    summary="List products",
    description="Return every product. Served from a short-lived cache.",
)
def list_products(
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),
) -> dict:
    products = use_case.execute()
    return ok(ProductsData(products=[ProductSchema.model_validate(p) for p in products]))


@router.get(
    "/search",
    response_model=Envelope[ProductsData],
    summary="Search products",
    description="Case-insensitive match on name or category. `q` needs 2+ characters.",
)
def search_products(
    q: Optional[str] = Query(default=None, max_length=100),
    use_case: SearchProductsUseCase = Depends(get_search_products_use_case),
) -> dict:
    products = use_case.execute(q)
    return ok(ProductsData(products=[ProductSchema.model_validate(p) for p in products]))


@router.get(
    "/category/{category}",
    response_model=Envelope[ProductsData],
    summary="List products in a category",
)
def list_products_by_category(
    category: str,
    use_case: ListProductsByCategoryUseCase = Depends(get_products_by_category_use_case),
) -> dict:
    products = use_case.execute(category)
    return ok(ProductsData(products=[ProductSchema.model_validate(p) for p in products]))


@router.get(
    "/{product_id}",
    response_model=Envelope[ProductData],
    summary="Get a product",
    description="Includes `is_watched` when the caller sends a valid token.",
)
def get_product(
    product_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    use_case: GetProductUseCase = Depends(get_product_use_case),
) -> dict:
    detail = use_case.execute(product_id, viewer_id=viewer.id if viewer else None)
    product = ProductDetailSchema(
        **ProductSchema.model_validate(detail.product).model_dump(),
        is_watched=detail.is_watched,
    )
    return ok(ProductData(product=product))


@router.post(
    "",
    response_model=Envelope[ProductData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a product (admin)",
)
def create_product(
    request: CreateProductRequest,
    admin: User = Depends(require_admin),
    context: RequestContext = Depends(get_request_context),
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),
) -> dict:
    command = CreateProductCommand(
        name=request.name.strip(),
        category=request.category.strip(),
        price=request.price,
        description=request.description,
        pe_ratio=request.pe_ratio,
        market_cap=request.market_cap,
        volume=request.volume,
    )
    product = use_case.execute(command, admin_id=admin.id, context=context)
    return ok(
        ProductData(product=ProductDetailSchema.model_validate(product)),
        message="Product created successfully",
    )


@router.put(
    "/{product_id}/price",
    response_model=Envelope[ProductData],
    summary="Update a product's price (admin)",
)
def update_product_price(
    product_id: int,
    request: UpdatePriceRequest,
    admin: User = Depends(require_admin),
    context: RequestContext = Depends(get_request_context),
    use_case: UpdateProductPriceUseCase = Depends(get_update_product_price_use_case),
) -> dict:
    product = use_case.execute(product_id, request.price, admin_id=admin.id, context=context)
    return ok(
        ProductData(product=ProductDetailSchema.model_validate(product)),
        message="Product price updated successfully",
    )
