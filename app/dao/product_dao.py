from typing import Optional
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.dao.base_dao import BaseDAO
from app.models.product import Product
import structlog

logger = structlog.get_logger()


class ProductDAO(BaseDAO[Product]):
    def __init__(self):
        super().__init__(Product)

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Product]:
        try:
            result = await db.execute(select(Product).where(Product.name == name))
            return result.scalars().first()
        except Exception as e:
            logger.error("Error getting product by name", name=name, error=str(e))
            raise


product_dao = ProductDAO()
