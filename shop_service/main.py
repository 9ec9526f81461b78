# shop_service/main.py
import logging
import os
from typing import Any, AsyncGenerator, List

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.accounts import authenticate_user, register_user
from shop_service.cart import add_to_cart, get_cart, remove_from_cart
from shop_service.db.database import get_db
from shop_service.db.functions import get_all_items, insert_items, item_to_schema, search_items_by_title
from shop_service.db.init_db import init_db
from shop_service.db.schemas import (
    AddToCartRequest,
    AddToCartResponse,
    CartItemSchema,
    InsertItemsResponse,
    ItemSchema,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    RemoveFromCartResponse,
)
from shop_service.errors import ShopError, StoreError, ValidationError

logging.basicConfig(
    level=os.getenv("SHOP_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [origin.strip() for origin in os.getenv("SHOP_CORS_ORIGINS", "*").split(",") if origin.strip()]


async def lifespan(app: FastAPI) -> AsyncGenerator:
    await init_db()
    yield


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    if isinstance(exc, StoreError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": "Server error"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=StoreError.status_code, content={"error": "Server error"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=ValidationError.status_code, content={"error": "Invalid request body"})


@app.get("/")
async def health_check():
    """Health check endpoint."""
    return {"status": "shop_service running"}


# Catalog

@app.get("/items", response_model=List[ItemSchema])
async def read_items(db: AsyncSession = Depends(get_db)):
    items = await get_all_items(db)
    return [item_to_schema(item) for item in items]


@app.get("/items/search", response_model=List[ItemSchema])
async def search_items(name: str = Query(default=""), db: AsyncSession = Depends(get_db)):
    items = await search_items_by_title(db, name)
    logger.debug("Search %r matched %d items", name, len(items))
    return [item_to_schema(item) for item in items]


@app.post("/add-dummy-items", response_model=InsertItemsResponse)
async def add_dummy_items(items_data: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    if not isinstance(items_data, list) or not items_data:
        raise ValidationError("Send an array of items")
    items = await insert_items(db, items_data)
    return InsertItemsResponse(
        message="Items added successfully",
        data=[item_to_schema(item) for item in items],
    )


# Cart

@app.post("/addToCart", response_model=AddToCartResponse)
async def add_item_to_cart(payload: AddToCartRequest, db: AsyncSession = Depends(get_db)):
    entry = await add_to_cart(db, payload.user_id, payload.id)
    return AddToCartResponse(message="Item added to cart", cart_item=entry)


@app.get("/getCart/{user_id}", response_model=List[CartItemSchema])
async def read_cart(user_id: str, db: AsyncSession = Depends(get_db)):
    return await get_cart(db, user_id)


@app.delete("/removeFromCart/{cart_id}", response_model=RemoveFromCartResponse)
async def delete_from_cart(cart_id: str, db: AsyncSession = Depends(get_db)):
    removed = await remove_from_cart(db, cart_id)
    return RemoveFromCartResponse(message="Item removed from cart", item=removed)


# Users

@app.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate_user(db, payload)
    return LoginResponse(message="Logged in successfully", user=user)


@app.post("/register", response_model=RegisterResponse)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)):
    await register_user(db, payload)
    return RegisterResponse(message="User registered successfully", redirect="LoginScreen")
