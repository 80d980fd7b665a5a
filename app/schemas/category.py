# app/schemas/category.py

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, StringConstraints, field_validator

from app.models.category import Category
from app.schemas.common import ApiModel, require_slug, strip_required
from app.schemas.product import ProductOut


class CategoryImage(ApiModel):
    url: str
    file_id: str
    name: str

    @field_validator("url", "file_id", "name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return strip_required(value)


class Faq(ApiModel):
    question: str
    answer: str

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return strip_required(value)


class CategoryWrite(ApiModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
    image: CategoryImage
    faqs: List[Faq] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_has_slug(cls, value: str) -> str:
        return require_slug(value)


class CategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    image: CategoryImage
    faqs: List[Faq]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, category: Category) -> "CategoryOut":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            image=CategoryImage(
                url=category.image_url,
                file_id=category.image_file_id,
                name=category.image_name,
            ),
            faqs=category.faqs or [],
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryEnvelope(ApiModel):
    success: bool = True
    data: CategoryOut
    message: Optional[str] = None


class CategoryListEnvelope(ApiModel):
    success: bool = True
    data: List[CategoryOut]


class CategoryProductsOut(ApiModel):
    category: CategoryOut
    products: List[ProductOut]
    products_count: int


class CategoryProductsEnvelope(ApiModel):
    success: bool = True
    data: CategoryProductsOut


class NameCheckOut(ApiModel):
    exists: bool
    category_id: Optional[int] = None
    name: str
