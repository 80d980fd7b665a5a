# app/services/products.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.errors import BadRequestError, NotFoundError
from app.models.category import Category
from app.models.product import Product
from app.schemas.product import ProductOut, ProductWrite
from app.services.review_stats import compute_review_percentages
from app.services.slugs import create_slug

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Liker:
    """Who is liking a product: a signed-in admin or an anonymous visitor."""

    identifier: str
    authenticated: bool


def _base_query(db: Session):
    return db.query(Product).options(selectinload(Product.category))


def list_products(db: Session, *, category_id: Optional[int] = None) -> List[Product]:
    query = _base_query(db)
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)
    return query.order_by(Product.created_at.desc(), Product.id.desc()).all()


def get_product(db: Session, product_id: int) -> Product:
    product = _base_query(db).filter(Product.id == product_id).first()
    if product is None:
        raise NotFoundError("Product not found")
    return product


def get_product_by_slug(db: Session, slug: str) -> Product:
    product = (
        _base_query(db)
        .filter(Product.slug == slug)
        .order_by(Product.id)
        .first()
    )
    if product is None:
        raise NotFoundError("Product not found")
    return product


def title_key(title: str) -> str:
    return title.strip().casefold()


def title_exists(db: Session, title: str) -> bool:
    return (
        db.query(Product.id)
        .filter(Product.title_key == title_key(title))
        .first()
        is not None
    )


def _apply(db: Session, product: Product, payload: ProductWrite) -> None:
    if db.query(Category.id).filter(Category.id == payload.category_id).first() is None:
        raise BadRequestError("Category does not exist")

    percentages = compute_review_percentages(payload.reddit_reviews)

    product.product_title = payload.product_title
    product.title_key = title_key(payload.product_title)
    product.slug = create_slug(payload.product_title)
    product.product_description = payload.product_description
    product.product_photos = list(payload.product_photos)
    product.product_price = payload.product_price
    product.affiliate_buttons = [button.model_dump() for button in payload.affiliate_buttons]
    product.reddit_reviews = [review.model_dump() for review in payload.reddit_reviews]
    product.likes_and_dislikes = (
        payload.likes_and_dislikes.model_dump() if payload.likes_and_dislikes is not None else None
    )
    product.product_score = payload.product_score
    product.product_rank = payload.product_rank
    product.category_id = payload.category_id

    product.positive_review_percentage = percentages.positive
    product.negative_review_percentage = percentages.negative
    product.neutral_review_percentage = percentages.neutral


def create_product(db: Session, payload: ProductWrite) -> Product:
    product = Product(
        like_count=0,
        liked_by=[],
        anonymous_like_count=0,
        anonymous_liked_by=[],
    )
    _apply(db, product, payload)

    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info("Product #%s created (%s)", product.id, product.product_title)
    return product


def update_product(db: Session, product_id: int, payload: ProductWrite) -> Product:
    product = get_product(db, product_id)
    _apply(db, product, payload)

    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info("Product #%s updated", product.id)
    return product


def delete_product(db: Session, product_id: int) -> ProductOut:
    product = get_product(db, product_id)
    deleted = ProductOut.from_model(product)

    db.delete(product)
    db.commit()

    logger.info("Product #%s deleted", product_id)
    return deleted


def has_liked(product: Product, liker: Liker) -> bool:
    likers = product.liked_by if liker.authenticated else product.anonymous_liked_by
    return liker.identifier in (likers or [])


def toggle_like(db: Session, product_id: int, liker: Liker) -> bool:
    """Adds or removes the like; returns True when the product is now liked."""
    product = get_product(db, product_id)

    # JSON columns are not mutation-tracked: always assign a new list
    if liker.authenticated:
        likers = list(product.liked_by or [])
    else:
        likers = list(product.anonymous_liked_by or [])

    if liker.identifier in likers:
        likers.remove(liker.identifier)
        liked = False
    else:
        likers.append(liker.identifier)
        liked = True

    if liker.authenticated:
        product.liked_by = likers
        product.like_count = len(likers)
    else:
        product.anonymous_liked_by = likers
        product.anonymous_like_count = len(likers)

    db.commit()
    db.refresh(product)
    return liked
