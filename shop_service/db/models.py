# shop_service/db/models.py
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from shop_service.db.database import Base


def generate_id() -> str:
    return uuid.uuid4().hex


class Item(Base):
    __tablename__ = "items"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)  # business key
    title = Column(String, index=True, nullable=False)
    price = Column(Float, nullable=False)
    currency = Column(String, nullable=False, default="USD")
    short_description = Column(String, nullable=False)
    full_description = Column(String, nullable=False)
    rating = Column(Float, nullable=False, default=0)
    # Discount is optional; both columns are set together or left empty
    discount_percentage = Column(Float, nullable=True)
    discount_price_after = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    images = relationship(
        "ItemImage", back_populates="item", order_by="ItemImage.position",
        cascade="all, delete-orphan", lazy="selectin",
    )
    reviews = relationship(
        "Review", back_populates="item", order_by="Review.position",
        cascade="all, delete-orphan", lazy="selectin",
    )
    suggested_products = relationship(
        "SuggestedProduct", back_populates="item", order_by="SuggestedProduct.position",
        cascade="all, delete-orphan", lazy="selectin",
    )


class ItemImage(Base):
    __tablename__ = "item_images"

    id = Column(Integer, primary_key=True, index=True)
    item_pk = Column(Integer, ForeignKey("items.pk", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    url = Column(String, nullable=False)

    item = relationship("Item", back_populates="images")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    item_pk = Column(Integer, ForeignKey("items.pk", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    user = Column(String, nullable=False)
    comment = Column(String, nullable=False)
    rating = Column(Float, nullable=False)

    item = relationship("Item", back_populates="reviews")


class SuggestedProduct(Base):
    __tablename__ = "suggested_products"

    id = Column(Integer, primary_key=True, index=True)
    item_pk = Column(Integer, ForeignKey("items.pk", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    product_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    image = Column(String, nullable=False)

    item = relationship("Item", back_populates="suggested_products")


class CartEntry(Base):
    __tablename__ = "cart_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "item_id", name="uq_cart_entries_user_item"),
    )

    # seq keeps insertion order; id is the public cartId
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False, default=generate_id)
    user_id = Column(String, index=True, nullable=False)
    item_id = Column(String, nullable=False)  # Item.id by value, may dangle


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
