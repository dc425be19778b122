from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import storage_error
from app.dao.product_dao import product_dao
from app.models.product import Product, ProductCreate, ProductUpdate
import structlog

logger = structlog.get_logger()


def _conflict() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Product already exists"
    )


def _not_found(detail: str = "Product not found") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail
    )


class ProductService:
    """
    Existence-checked operations on the products table.

    Duplicate names are rejected up front and again by the unique index on
    ``products.name``; update and delete treat zero affected rows as absence,
    so a row removed between the check and the write still reports 404.
    """

    def __init__(self):
        self.product_dao = product_dao

    async def _name_taken(self, db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> bool:
        """Whether an integrity failure was the unique name index and not another constraint."""
        try:
            holder = await self.product_dao.get_by_name(db, name)
        except SQLAlchemyError as e:
            logger.error("Error re-checking product name", name=name, error=str(e))
            return False
        return holder is not None and holder.id != exclude_id

    async def get_products(self, db: AsyncSession) -> List[Product]:
        try:
            products = await self.product_dao.get_all(db)
            logger.info("Retrieved products", count=len(products))
            return products
        except SQLAlchemyError as e:
            raise storage_error(e, "Failed to fetch products")

    async def get_product(self, db: AsyncSession, product_id: int) -> Product:
        try:
            product = await self.product_dao.get_by_id(db, product_id)
        except SQLAlchemyError as e:
            raise storage_error(e, "Failed to fetch product", product_id=product_id)

        if not product:
            logger.warning("Product not found", product_id=product_id)
            raise _not_found()
        return product

    async def create_product(self, db: AsyncSession, product_create: ProductCreate) -> Product:
        try:
            existing = await self.product_dao.get_by_name(db, product_create.name)
            if existing:
                logger.warning("Duplicate product name", name=product_create.name)
                raise _conflict()

            product = await self.product_dao.create(db, obj_in=product_create.model_dump())
            logger.info("Product created successfully", product_id=product.id)
            return product
        except IntegrityError as e:
            if await self._name_taken(db, product_create.name):
                logger.warning("Duplicate product name rejected by store", name=product_create.name, error=str(e))
                raise _conflict()
            raise storage_error(e, "Failed to create product", name=product_create.name)
        except SQLAlchemyError as e:
            raise storage_error(e, "Failed to create product", name=product_create.name)

    async def update_product(self, db: AsyncSession, product_id: int, product_update: ProductUpdate) -> None:
        try:
            existing = await self.product_dao.get_by_id(db, product_id)
            if not existing:
                logger.warning("Product not found", product_id=product_id)
                raise _not_found()

            updated = await self.product_dao.update_by_id(
                db, id=product_id, obj_in=product_update.model_dump()
            )
            if updated == 0:
                logger.warning("Product vanished before update", product_id=product_id)
                raise _not_found()

            logger.info("Product updated successfully", product_id=product_id)
        except IntegrityError as e:
            if await self._name_taken(db, product_update.name, exclude_id=product_id):
                logger.warning("Product rename collides with existing name", product_id=product_id, error=str(e))
                raise _conflict()
            raise storage_error(e, "Failed to update product", product_id=product_id)
        except SQLAlchemyError as e:
            raise storage_error(e, "Failed to update product", product_id=product_id)

    async def delete_product(self, db: AsyncSession, product_id: int) -> None:
        try:
            existing = await self.product_dao.get_by_id(db, product_id)
            if not existing:
                logger.warning("Product not found", product_id=product_id)
                raise _not_found("Product does not exist")

            deleted = await self.product_dao.delete_by_id(db, id=product_id)
            if deleted == 0:
                logger.warning("Product vanished before delete", product_id=product_id)
                raise _not_found("Product does not exist")

            logger.info("Product deleted successfully", product_id=product_id)
        except SQLAlchemyError as e:
            raise storage_error(e, "Failed to delete product", product_id=product_id)


product_service = ProductService()
