"""
Products API endpoints.

CRUD routes over the product service. Domain errors are translated into HTTP
responses by the exception handlers registered in ``catalog.main``.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict, Field

from ...constants import API_PREFIX
from ...services.products.product_service import ProductService
from ..dependencies import get_product_service

router = APIRouter(prefix=API_PREFIX, tags=["products"])


# Pydantic schemas for API
class ProductBase(BaseModel):
    """Fields supplied by clients on create and update."""

    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field("", description="Free-form description")
    price: int = Field(..., ge=0, description="Price in the smallest currency unit")


class ProductCreate(ProductBase):
    """Schema for creating products."""


class ProductUpdate(ProductBase):
    """Schema for replacing a product's mutable fields."""


class ProductPatch(BaseModel):
    """Schema for changing some fields; omitted fields keep their value."""

    name: Optional[str] = Field(None, min_length=1, description="Product name")
    description: Optional[str] = Field(None, description="Free-form description")
    price: Optional[int] = Field(
        None, ge=0, description="Price in the smallest currency unit"
    )


class ProductRead(ProductBase):
    """Schema for reading products."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID


@router.get("", response_model=List[ProductRead])
async def list_products(service: ProductService = Depends(get_product_service)):
    """All products, most recently updated first."""
    return await service.list()


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    response: Response,
    service: ProductService = Depends(get_product_service),
):
    product = await service.add(payload.name, payload.description, payload.price)
    response.headers["Location"] = f"{API_PREFIX}/{product.id}"
    return product


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: UUID, service: ProductService = Depends(get_product_service)
):
    return await service.find(product_id)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    return await service.modify(
        product_id, payload.name, payload.description, payload.price
    )


@router.patch("/{product_id}", response_model=ProductRead)
async def patch_product(
    product_id: UUID,
    payload: ProductPatch,
    service: ProductService = Depends(get_product_service),
):
    return await service.patch(
        product_id,
        name=payload.name,
        description=payload.description,
        price=payload.price,
    )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID, service: ProductService = Depends(get_product_service)
) -> Response:
    await service.remove(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
