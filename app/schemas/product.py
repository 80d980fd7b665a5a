# app/schemas/product.py

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, StringConstraints, field_validator

from app.models.product import Product
from app.schemas.common import ApiModel, check_url, require_slug, strip_required
from app.schemas.reddit import RedditReview

PRICE_PATTERN = r"^\$?\d+(\.\d{2})?$"

MAX_PHOTOS = 5
MAX_AFFILIATE_BUTTONS = 10


class AffiliateButton(ApiModel):
    link: str
    text: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]

    @field_validator("link")
    @classmethod
    def _valid_link(cls, value: str) -> str:
        return check_url(value)


class LikeDislikePoint(ApiModel):
    heading: str
    points: List[str] = Field(min_length=1, max_length=10)

    @field_validator("heading")
    @classmethod
    def _heading_not_blank(cls, value: str) -> str:
        return strip_required(value)


class LikesAndDislikes(ApiModel):
    likes: List[LikeDislikePoint] = Field(default_factory=list, max_length=10)
    dislikes: List[LikeDislikePoint] = Field(default_factory=list, max_length=10)


class ProductWrite(ApiModel):
    """Body of POST /api/products and PUT /api/products/{id} (full replace)."""

    product_title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)]
    product_description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=2000)]
    product_photos: List[str] = Field(default_factory=list)
    product_price: Annotated[str, StringConstraints(strip_whitespace=True, pattern=PRICE_PATTERN)]
    affiliate_buttons: List[AffiliateButton] = Field(min_length=1, max_length=MAX_AFFILIATE_BUTTONS)
    reddit_reviews: List[RedditReview] = Field(default_factory=list)
    product_score: int = Field(default=50, ge=0, le=100)
    product_rank: Optional[int] = Field(default=None, ge=0, le=100)
    category_id: int
    likes_and_dislikes: Optional[LikesAndDislikes] = None

    @field_validator("product_title")
    @classmethod
    def _title_has_slug(cls, value: str) -> str:
        return require_slug(value)

    @field_validator("product_photos")
    @classmethod
    def _clean_photos(cls, value: List[str]) -> List[str]:
        photos = [check_url(photo) for photo in value if photo.strip()]
        if len(photos) > MAX_PHOTOS:
            raise ValueError(f"Maximum {MAX_PHOTOS} photos allowed")
        return photos


class ProductOut(ApiModel):
    id: int
    product_title: str
    slug: str
    product_description: str
    product_photos: List[str]
    product_price: str
    affiliate_buttons: List[AffiliateButton]
    reddit_reviews: List[RedditReview]
    likes_and_dislikes: Optional[LikesAndDislikes] = None
    product_score: int
    product_rank: Optional[int] = None
    category_id: int
    category: Optional[str] = None

    positive_review_percentage: int
    negative_review_percentage: int
    neutral_review_percentage: int

    like_count: int
    anonymous_like_count: int

    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,
            product_title=product.product_title,
            slug=product.slug,
            product_description=product.product_description,
            product_photos=product.product_photos or [],
            product_price=product.product_price,
            affiliate_buttons=product.affiliate_buttons or [],
            reddit_reviews=product.reddit_reviews or [],
            likes_and_dislikes=product.likes_and_dislikes,
            product_score=product.product_score,
            product_rank=product.product_rank,
            category_id=product.category_id,
            category=product.category.name if product.category is not None else None,
            positive_review_percentage=product.positive_review_percentage,
            negative_review_percentage=product.negative_review_percentage,
            neutral_review_percentage=product.neutral_review_percentage,
            like_count=product.like_count,
            anonymous_like_count=product.anonymous_like_count,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductDeleteOut(ApiModel):
    message: str
    deleted_product: ProductOut


class TitleCheckOut(ApiModel):
    exists: bool
    title: str


class LikeStatusOut(ApiModel):
    like_count: int
    user_has_liked: bool


class LikeToggleOut(ApiModel):
    liked: bool
    like_count: int
