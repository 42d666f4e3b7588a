"""
Palate — Product catalog API

Owner-side CRUD for the tagged products that recommendations are drawn from.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi import Response as HTTPResponse

from palate.api.deps import get_current_account_id, get_product_service
from palate.models import Product
from palate.schemas.product import ProductCreate, ProductOut, ProductUpdate
from palate.services.product_service import ProductService

router = APIRouter()


@router.get(
    "/products",
    response_model=list[ProductOut],
    summary="List the product catalog",
)
async def list_products(
    account_id: str = Depends(get_current_account_id),
    products: ProductService = Depends(get_product_service),
) -> list[Product]:
    """Return the account's catalog, newest first."""
    return await products.list_catalog(account_id)


@router.post(
    "/products",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a product",
)
async def create_product(
    payload: ProductCreate,
    account_id: str = Depends(get_current_account_id),
    products: ProductService = Depends(get_product_service),
) -> Product:
    return await products.create(
        account_id,
        payload.name,
        description=payload.description,
        image_url=payload.image_url,
        tags=payload.tags,
    )


@router.patch(
    "/products/{product_id}",
    response_model=ProductOut,
    summary="Update a product",
)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    account_id: str = Depends(get_current_account_id),
    products: ProductService = Depends(get_product_service),
) -> Product:
    update_data = payload.model_dump(exclude_unset=True)
    return await products.update(account_id, product_id, update_data)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    account_id: str = Depends(get_current_account_id),
    products: ProductService = Depends(get_product_service),
) -> HTTPResponse:
    await products.delete(account_id, product_id)
    return HTTPResponse(status_code=status.HTTP_204_NO_CONTENT)
