# shop_service/cart.py
"""Cart operations: keeps each user's cart unique and joins it against the catalog."""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.db.functions import (
    delete_cart_entry_by_id,
    entry_to_schema,
    find_cart_entry,
    get_cart_entries_by_user_id,
    get_items_by_ids,
    insert_cart_entry,
    item_to_schema,
)
from shop_service.db.schemas import CartEntrySchema, CartItemSchema
from shop_service.errors import DuplicateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


async def add_to_cart(db: AsyncSession, user_id: Optional[str], item_id: Optional[str]) -> CartEntrySchema:
    if not user_id or not item_id:
        raise ValidationError("Item ID and User ID required")

    # Fast path; the unique constraint on (user_id, item_id) settles races
    if await find_cart_entry(db, user_id, item_id):
        raise DuplicateError("Item already in cart")

    entry = await insert_cart_entry(db, user_id, item_id)
    logger.info("Added item %s to cart of user %s (cart id %s)", item_id, user_id, entry.id)
    return entry_to_schema(entry)


async def remove_from_cart(db: AsyncSession, cart_id: str) -> CartEntrySchema:
    removed = await delete_cart_entry_by_id(db, cart_id)
    if removed is None:
        raise NotFoundError("Item not found in cart")
    logger.info("Removed cart entry %s (item %s) for user %s", cart_id, removed.item_id, removed.user_id)
    return removed


async def get_cart(db: AsyncSession, user_id: str) -> List[CartItemSchema]:
    """Return the user's cart as full catalog items, each tagged with its ``cart_id``.

    Entries whose item is no longer in the catalog are left out of the result
    but stay in storage. The order follows the order the entries were added.
    """
    entries = await get_cart_entries_by_user_id(db, user_id)
    items = await get_items_by_ids(db, (entry.item_id for entry in entries))

    cart = []
    for entry in entries:
        item = items.get(entry.item_id)
        if item is None:
            logger.debug("Skipping dangling cart entry %s -> item %s", entry.id, entry.item_id)
            continue
        cart.append(CartItemSchema(**item_to_schema(item).model_dump(), cart_id=entry.id))
    return cart
