# shop_service/db/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ReviewSchema(CamelModel):
    user: str
    comment: str
    rating: float


class DiscountSchema(CamelModel):
    percentage: float
    price_after_discount: float


class SuggestedProductSchema(CamelModel):
    id: str
    title: str
    price: float
    image: str


class ItemBase(CamelModel):
    id: str = Field(min_length=1)
    title: str
    price: float
    currency: str = "USD"
    short_description: str
    full_description: str
    rating: float = 0
    reviews: List[ReviewSchema] = []
    discount: Optional[DiscountSchema] = None
    suggested_products: List[SuggestedProductSchema] = []
    images: List[str] = Field(min_length=1)


class ItemSchema(ItemBase):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartItemSchema(ItemSchema):
    """A catalog item as it appears in a cart, tagged with its cart entry id."""
    cart_id: str


class CartEntrySchema(CamelModel):
    cart_id: str
    user_id: str
    item_id: str


class AddToCartRequest(CamelModel):
    user_id: Optional[str] = None
    id: Optional[str] = None


class AddToCartResponse(CamelModel):
    message: str
    cart_item: CartEntrySchema


class RemoveFromCartResponse(CamelModel):
    message: str
    item: CartEntrySchema


class InsertItemsResponse(CamelModel):
    message: str
    data: List[ItemSchema]


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(CamelModel):
    user_id: str
    email: str


class LoginResponse(CamelModel):
    message: str
    user: UserSummary


class RegisterRequest(CamelModel):
    name: Optional[str] = None
    password: Optional[str] = None
    age: Optional[int] = None
    email: Optional[str] = None


class RegisterResponse(CamelModel):
    message: str
    redirect: str
