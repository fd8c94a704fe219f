from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)  # Shown next to the user's reviews
    role = Column(String(20), default="user", nullable=False)  # user, admin
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    products = relationship("Product", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def display_name(self) -> str:
        return self.full_name or self.email.split("@")[0]


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    info = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    ratings = Column(Float, default=0, nullable=False)  # Mean of reviews.ratings
    # Ordered list of {"remote_id": str, "url": str} on the media host
    images = Column(JSON, default=list, nullable=False)
    # Size (as string) -> count, e.g. {"40": 3, "42": 1}
    stock = Column(JSON, default=dict, nullable=False)
    num_of_reviews = Column(Integer, default=0, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="products")
    reviews = relationship(
        "Review",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Review.id",
    )


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)  # Reviewer display name at time of review
    avatar = Column(String(500), nullable=False, default="")
    ratings = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    comment = Column(Text, nullable=False)
    recommend = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    product = relationship("Product", back_populates="reviews")
