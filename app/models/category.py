# app/models/category.py

from sqlalchemy import JSON, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from app.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(50), nullable=False)
    # casefolded name; SQL lower() only folds ASCII on SQLite
    name_key = Column(String(150), nullable=False, unique=True)
    slug = Column(String(80), nullable=False, index=True)

    # Image metadata returned by the upload service
    image_url = Column(String(500), nullable=False)
    image_file_id = Column(String(255), nullable=False)
    image_name = Column(String(255), nullable=False)

    # [{"question": ..., "answer": ...}]
    faqs = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    products = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"
