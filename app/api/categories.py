# app/api/categories.py

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import BadRequestError
from app.core.security import AdminUser, require_admin
from app.models.category import Category
from app.schemas.category import (
    CategoryEnvelope,
    CategoryListEnvelope,
    CategoryOut,
    CategoryProductsEnvelope,
    CategoryProductsOut,
    CategoryWrite,
    NameCheckOut,
)
from app.schemas.product import ProductOut
from app.services import categories as category_service
from app.services.listing import search_categories

router = APIRouter(prefix="/api/categories", tags=["categories"])


def _with_products(db: Session, category: Category) -> CategoryProductsEnvelope:
    category, products = category_service.category_with_products(db, category)
    return CategoryProductsEnvelope(
        data=CategoryProductsOut(
            category=CategoryOut.from_model(category),
            products=[ProductOut.from_model(p) for p in products],
            products_count=len(products),
        )
    )


@router.get("", response_model=CategoryListEnvelope)
def list_categories(search: Optional[str] = None, db: Session = Depends(get_db)):
    categories = search_categories(category_service.list_categories(db), search)
    return CategoryListEnvelope(data=[CategoryOut.from_model(c) for c in categories])


@router.post("", response_model=CategoryEnvelope, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryWrite,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    category = category_service.create_category(db, payload)
    return CategoryEnvelope(
        data=CategoryOut.from_model(category),
        message="Category created successfully",
    )


@router.get("/check-name", response_model=NameCheckOut)
def check_name(name: Optional[str] = None, db: Session = Depends(get_db)):
    """Case-insensitive lookup used by the admin form while typing."""
    if not name or not name.strip():
        raise BadRequestError("Name parameter is required")

    existing = category_service.find_by_name(db, name)
    return NameCheckOut(
        exists=existing is not None,
        category_id=existing.id if existing is not None else None,
        name=name.strip(),
    )


@router.get("/by-title/{slug}", response_model=CategoryProductsEnvelope)
def get_category_by_slug(slug: str, db: Session = Depends(get_db)):
    return _with_products(db, category_service.get_by_slug(db, slug))


@router.get("/categoryproducts/{category_id}", response_model=CategoryProductsEnvelope)
def get_category_products(category_id: int, db: Session = Depends(get_db)):
    return _with_products(db, category_service.get_category(db, category_id))


@router.get("/{category_id}", response_model=CategoryEnvelope)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return CategoryEnvelope(data=CategoryOut.from_model(category_service.get_category(db, category_id)))


@router.put("/{category_id}", response_model=CategoryEnvelope)
def update_category(
    category_id: int,
    payload: CategoryWrite,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    category = category_service.update_category(db, category_id, payload)
    return CategoryEnvelope(
        data=CategoryOut.from_model(category),
        message="Category updated successfully",
    )


@router.delete("/{category_id}", response_model=CategoryEnvelope)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    deleted = category_service.delete_category(db, category_id)
    return CategoryEnvelope(data=deleted, message="Category deleted successfully")
