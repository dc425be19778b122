from sqlmodel import SQLModel, Field
from sqlalchemy import Double, Text
from typing import Optional


class ProductBase(SQLModel):
    name: str = Field(index=True, unique=True, max_length=255)
    # DOUBLE on MySQL; FLOAT there is single precision
    price: float = Field(sa_type=Double)
    description: Optional[str] = Field(default=None, sa_type=Text)


class Product(ProductBase, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        nullable=False
    )


class ProductCreate(ProductBase):
    pass


class ProductRead(ProductBase):
    id: int


class ProductUpdate(ProductBase):
    pass
