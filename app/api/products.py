# app/api/products.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import BadRequestError
from app.core.security import AdminUser, get_current_user, require_admin
from app.schemas.product import (
    LikeStatusOut,
    LikeToggleOut,
    ProductDeleteOut,
    ProductOut,
    ProductWrite,
    TitleCheckOut,
)
from app.services import products as product_service
from app.services.listing import ProductSort, paginate, search_products, sort_products

router = APIRouter(prefix="/api/products", tags=["products"])

VISITOR_HEADER = "X-Visitor-Id"


def get_liker(
    request: Request,
    user: Optional[AdminUser] = Depends(get_current_user),
) -> product_service.Liker:
    if user is not None:
        return product_service.Liker(identifier=user.id, authenticated=True)

    visitor = (request.headers.get(VISITOR_HEADER) or "").strip()
    if not visitor:
        visitor = request.client.host if request.client else "unknown"
    return product_service.Liker(identifier=visitor, authenticated=False)


@router.get("", response_model=List[ProductOut])
def list_products(
    response: Response,
    search: Optional[str] = None,
    sort: ProductSort = "newest",
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    page: Optional[int] = Query(default=None, ge=1),
    per_page: int = Query(default=12, ge=1, le=100, alias="perPage"),
    db: Session = Depends(get_db),
):
    """
    Lists products, newest first by default.
    Without `page` the whole (filtered) list is returned.
    """
    products = product_service.list_products(db, category_id=category_id)
    products = sort_products(search_products(products, search), sort)

    response.headers["X-Total-Count"] = str(len(products))
    return [ProductOut.from_model(p) for p in paginate(products, page, per_page)]


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductWrite,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    product = product_service.create_product(db, payload)
    return ProductOut.from_model(product)


@router.delete("", response_model=ProductDeleteOut)
def delete_product_by_query(
    id: Optional[str] = None,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    if not id:
        raise BadRequestError("Product ID is required")
    if not id.isdigit():
        raise BadRequestError("Invalid product ID format")

    deleted = product_service.delete_product(db, int(id))
    return ProductDeleteOut(message="Product deleted successfully", deleted_product=deleted)


@router.get("/check-title", response_model=TitleCheckOut)
def check_title(title: Optional[str] = None, db: Session = Depends(get_db)):
    if not title or not title.strip():
        raise BadRequestError("Title parameter is required")
    return TitleCheckOut(exists=product_service.title_exists(db, title), title=title.strip())


@router.get("/slug/{slug}", response_model=ProductOut)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    return ProductOut.from_model(product_service.get_product_by_slug(db, slug))


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ProductOut.from_model(product_service.get_product(db, product_id))


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductWrite,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    """
    Replaces the product. Review percentages are recomputed from `redditReviews`;
    like counters are left untouched.
    """
    product = product_service.update_product(db, product_id, payload)
    return ProductOut.from_model(product)


@router.delete("/{product_id}", response_model=ProductDeleteOut)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    deleted = product_service.delete_product(db, product_id)
    return ProductDeleteOut(message="Product deleted successfully", deleted_product=deleted)


@router.get("/{product_id}/like", response_model=LikeStatusOut)
def like_status(
    product_id: int,
    liker: product_service.Liker = Depends(get_liker),
    db: Session = Depends(get_db),
):
    product = product_service.get_product(db, product_id)
    return LikeStatusOut(
        like_count=product.total_likes,
        user_has_liked=product_service.has_liked(product, liker),
    )


@router.post("/{product_id}/like", response_model=LikeToggleOut)
def toggle_like(
    product_id: int,
    liker: product_service.Liker = Depends(get_liker),
    db: Session = Depends(get_db),
):
    liked = product_service.toggle_like(db, product_id, liker)
    product = product_service.get_product(db, product_id)
    return LikeToggleOut(liked=liked, like_count=product.total_likes)
