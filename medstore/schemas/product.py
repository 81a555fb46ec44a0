from pydantic import Field
from typing import List, Optional
from datetime import datetime

from medstore.schemas.base import CamelModel, Money


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str


class ProductCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    short_desc: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Money] = Field(default=None, ge=0)
    currency: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    image_urls: List[str] = []
    specifications: Optional[dict] = None
    category_id: Optional[int] = None
    is_active: bool = True


class ProductResponse(CamelModel):
    id: int
    name: str
    slug: str
    sku: str
    description: Optional[str] = None
    short_desc: Optional[str] = None
    price: Money
    currency: str
    stock: int
    image_urls: List[str] = []
    specifications: Optional[dict] = None
    is_active: bool
    category_id: int
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    created_at: datetime
