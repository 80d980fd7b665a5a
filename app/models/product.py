# app/models/product.py

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from app.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)

    product_title = Column(String(100), nullable=False)
    title_key = Column(String(300), nullable=False, index=True)  # casefolded title
    slug = Column(String(120), nullable=False, index=True)
    product_description = Column(Text, nullable=False)
    product_photos = Column(JSON, nullable=False, default=list)   # up to 5 URLs
    product_price = Column(String(20), nullable=False)            # ex.: "$129.99"

    # [{"link": ..., "text": ...}], 1-10 entries
    affiliate_buttons = Column(JSON, nullable=False, default=list)

    # [{"comment", "tag", "link", "author", "subreddit"}]
    reddit_reviews = Column(JSON, nullable=False, default=list)

    # {"likes": [{"heading", "points"}], "dislikes": [...]}
    likes_and_dislikes = Column(JSON, nullable=True)

    product_score = Column(Integer, nullable=False, default=50)
    product_rank = Column(Integer, nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    # Derived from reddit_reviews on every write
    positive_review_percentage = Column(Integer, nullable=False, default=0)
    negative_review_percentage = Column(Integer, nullable=False, default=0)
    neutral_review_percentage = Column(Integer, nullable=False, default=0)

    like_count = Column(Integer, nullable=False, default=0)
    liked_by = Column(JSON, nullable=False, default=list)
    anonymous_like_count = Column(Integer, nullable=False, default=0)
    anonymous_liked_by = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    category = relationship("Category", back_populates="products")

    @property
    def total_likes(self) -> int:
        return (self.like_count or 0) + (self.anonymous_like_count or 0)

    def __repr__(self) -> str:
        return f"<Product id={self.id} title={self.product_title!r}>"
