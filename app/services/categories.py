# app/services/categories.py

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.errors import ConflictError, NotFoundError
from app.models.category import Category
from app.models.product import Product
from app.schemas.category import CategoryOut, CategoryWrite
from app.services.slugs import create_slug, normalize_slug

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "Category with this name already exists"


def name_key(name: str) -> str:
    return name.strip().casefold()


def list_categories(db: Session) -> List[Category]:
    return (
        db.query(Category)
        .order_by(Category.created_at.desc(), Category.id.desc())
        .all()
    )


def get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if category is None:
        raise NotFoundError("Category not found")
    return category


def find_by_name(db: Session, name: str, *, exclude_id: Optional[int] = None) -> Optional[Category]:
    """Case-insensitive exact match on the category name."""
    query = db.query(Category).filter(Category.name_key == name_key(name))
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first()


def get_by_slug(db: Session, slug: str) -> Category:
    category = (
        db.query(Category)
        .filter(Category.slug == normalize_slug(slug))
        .order_by(Category.id)
        .first()
    )
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _apply(category: Category, payload: CategoryWrite) -> None:
    category.name = payload.name
    category.name_key = name_key(payload.name)
    category.slug = create_slug(payload.name)
    category.image_url = payload.image.url
    category.image_file_id = payload.image.file_id
    category.image_name = payload.image.name
    category.faqs = [faq.model_dump() for faq in payload.faqs]


def _commit(db: Session, category: Category) -> Category:
    try:
        db.commit()
    except IntegrityError:
        # lost a race against another write with the same name
        db.rollback()
        raise ConflictError("Category name must be unique")
    db.refresh(category)
    return category


def create_category(db: Session, payload: CategoryWrite) -> Category:
    if find_by_name(db, payload.name) is not None:
        raise ConflictError(DUPLICATE_NAME)

    category = Category()
    _apply(category, payload)
    db.add(category)
    category = _commit(db, category)

    logger.info("Category #%s created (%s)", category.id, category.name)
    return category


def update_category(db: Session, category_id: int, payload: CategoryWrite) -> Category:
    category = get_category(db, category_id)

    if find_by_name(db, payload.name, exclude_id=category_id) is not None:
        raise ConflictError(DUPLICATE_NAME)

    _apply(category, payload)
    category = _commit(db, category)

    logger.info("Category #%s updated", category.id)
    return category


def delete_category(db: Session, category_id: int) -> CategoryOut:
    category = get_category(db, category_id)

    product_count = db.query(Product).filter(Product.category_id == category_id).count()
    if product_count:
        raise ConflictError(
            f"Category still has {product_count} product(s); move or delete them first"
        )

    deleted = CategoryOut.from_model(category)
    db.delete(category)
    db.commit()

    logger.info("Category #%s deleted", category_id)
    return deleted


def category_with_products(db: Session, category: Category) -> Tuple[Category, List[Product]]:
    products = (
        db.query(Product)
        .options(selectinload(Product.category))
        .filter(Product.category_id == category.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )
    return category, products
