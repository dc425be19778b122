from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.core.security import validate_request
from app.models.product import ProductCreate, ProductRead, ProductUpdate
from app.schemas.product_schemas import ErrorResponse, MessageResponse, ProductCreatedResponse
from app.services.product_service import product_service
import structlog

logger = structlog.get_logger()

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(validate_request)],
    responses={
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)


@router.get("", response_model=List[ProductRead])
async def get_products(db: AsyncSession = Depends(get_async_session)):
    return await product_service.get_products(db)


@router.get(
    "/{product_id}",
    response_model=ProductRead,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(product_id: int, db: AsyncSession = Depends(get_async_session)):
    return await product_service.get_product(db, product_id)


@router.post(
    "",
    response_model=ProductCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_product(
    product_create: ProductCreate,
    db: AsyncSession = Depends(get_async_session),
):
    product = await product_service.create_product(db, product_create)
    return ProductCreatedResponse(message="Product created", id=product.id)


@router.put(
    "/{product_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    product_update: ProductUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    await product_service.update_product(db, product_id, product_update)
    return MessageResponse(message="Product updated successfully")


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_async_session)):
    await product_service.delete_product(db, product_id)
    return MessageResponse(message="Product deleted successfully")
