# shop_service/db/functions.py
import logging
from typing import Dict, Iterable, List, Optional

import pydantic
from pydantic import TypeAdapter
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shop_service.db.models import CartEntry, Item, ItemImage, Review, SuggestedProduct, User
from shop_service.db.schemas import (
    CartEntrySchema,
    DiscountSchema,
    ItemBase,
    ItemSchema,
    ReviewSchema,
    SuggestedProductSchema,
)
from shop_service.errors import DuplicateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_item_batch = TypeAdapter(List[ItemBase])


# Catalog

def item_to_schema(item: Item) -> ItemSchema:
    discount = None
    if item.discount_percentage is not None and item.discount_price_after is not None:
        discount = DiscountSchema(
            percentage=item.discount_percentage,
            price_after_discount=item.discount_price_after,
        )
    return ItemSchema(
        id=item.id,
        title=item.title,
        price=item.price,
        currency=item.currency,
        short_description=item.short_description,
        full_description=item.full_description,
        rating=item.rating,
        reviews=[
            ReviewSchema(user=r.user, comment=r.comment, rating=r.rating)
            for r in item.reviews
        ],
        discount=discount,
        suggested_products=[
            SuggestedProductSchema(id=s.product_id, title=s.title, price=s.price, image=s.image)
            for s in item.suggested_products
        ],
        images=[image.url for image in item.images],
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _item_from_schema(data: ItemBase) -> Item:
    return Item(
        id=data.id,
        title=data.title,
        price=data.price,
        currency=data.currency,
        short_description=data.short_description,
        full_description=data.full_description,
        rating=data.rating,
        discount_percentage=data.discount.percentage if data.discount else None,
        discount_price_after=data.discount.price_after_discount if data.discount else None,
        images=[ItemImage(position=i, url=url) for i, url in enumerate(data.images)],
        reviews=[
            Review(position=i, user=r.user, comment=r.comment, rating=r.rating)
            for i, r in enumerate(data.reviews)
        ],
        suggested_products=[
            SuggestedProduct(position=i, product_id=s.id, title=s.title, price=s.price, image=s.image)
            for i, s in enumerate(data.suggested_products)
        ],
    )


async def get_all_items(db: AsyncSession) -> List[Item]:
    result = await db.execute(select(Item).order_by(Item.pk))
    return list(result.scalars().all())


async def get_item_by_id(db: AsyncSession, item_id: str) -> Optional[Item]:
    result = await db.execute(select(Item).filter(Item.id == item_id))
    return result.scalar_one_or_none()


async def get_items_by_ids(db: AsyncSession, item_ids: Iterable[str]) -> Dict[str, Item]:
    """Fetch every item whose business key is in ``item_ids``, keyed by that id.

    Ids with no matching item are simply absent from the result.
    """
    ids = set(item_ids)
    if not ids:
        return {}
    result = await db.execute(select(Item).filter(Item.id.in_(ids)))
    return {item.id: item for item in result.scalars().all()}


async def search_items_by_title(db: AsyncSession, text: str) -> List[Item]:
    """Case-insensitive literal substring search on item titles."""
    result = await db.execute(
        select(Item).filter(Item.title.icontains(text, autoescape=True)).order_by(Item.pk)
    )
    items = list(result.scalars().all())
    if not items:
        raise NotFoundError("No data found")
    return items


async def insert_items(db: AsyncSession, items_data: list) -> List[Item]:
    """Validate and insert a batch of items. Either all of them land or none do."""
    try:
        batch = _item_batch.validate_python(items_data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid item data at {location}: {first['msg']}")

    seen = set()
    for data in batch:
        if data.id in seen:
            raise DuplicateError(f"Duplicate item id in batch: {data.id}")
        seen.add(data.id)

    items = [_item_from_schema(data) for data in batch]
    db.add_all(items)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("One or more item ids already exist")
    logger.info("Inserted %d catalog items", len(items))
    return items


async def delete_item(db: AsyncSession, item_id: str) -> Optional[Item]:
    item = await get_item_by_id(db, item_id)
    if not item:
        return None
    await db.delete(item)
    await db.commit()
    return item


# Cart

def entry_to_schema(entry) -> CartEntrySchema:
    return CartEntrySchema(cart_id=entry.id, user_id=entry.user_id, item_id=entry.item_id)


async def find_cart_entry(db: AsyncSession, user_id: str, item_id: str) -> Optional[CartEntry]:
    result = await db.execute(
        select(CartEntry).filter(CartEntry.user_id == user_id, CartEntry.item_id == item_id)
    )
    return result.scalar_one_or_none()


async def get_cart_entries_by_user_id(db: AsyncSession, user_id: str) -> List[CartEntry]:
    result = await db.execute(
        select(CartEntry).filter(CartEntry.user_id == user_id).order_by(CartEntry.seq)
    )
    return list(result.scalars().all())


async def insert_cart_entry(db: AsyncSession, user_id: str, item_id: str) -> CartEntry:
    entry = CartEntry(user_id=user_id, item_id=item_id)
    db.add(entry)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent insert of the same pair
        await db.rollback()
        raise DuplicateError("Item already in cart")
    await db.refresh(entry)
    return entry


async def delete_cart_entry_by_id(db: AsyncSession, cart_id: str) -> Optional[CartEntrySchema]:
    result = await db.execute(
        delete(CartEntry)
        .where(CartEntry.id == cart_id)
        .returning(CartEntry.id, CartEntry.user_id, CartEntry.item_id)
        .execution_options(synchronize_session=False)
    )
    row = result.first()
    await db.commit()
    if row is None:
        return None
    return entry_to_schema(row)


# Users

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, name: str, email: str, hashed_password: str, age: int) -> User:
    db_user = User(name=name, email=email, hashed_password=hashed_password, age=age)
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("Email already registered")
    await db.refresh(db_user)
    return db_user
