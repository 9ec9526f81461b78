# shop_service/accounts.py
import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.auth_utils import hash_password, verify_password
from shop_service.db.functions import create_user, get_user_by_email
from shop_service.db.schemas import LoginRequest, RegisterRequest, UserSummary
from shop_service.errors import DuplicateError, ValidationError

logger = logging.getLogger(__name__)


async def register_user(db: AsyncSession, payload: RegisterRequest):
    if not payload.name or not payload.password or not payload.age or not payload.email:
        raise ValidationError("Fill all fields")

    if await get_user_by_email(db, payload.email):
        raise DuplicateError("Email already registered")

    hashed_password = await run_in_threadpool(hash_password, payload.password)
    user = await create_user(
        db,
        name=payload.name,
        email=payload.email,
        hashed_password=hashed_password,
        age=payload.age,
    )
    logger.info("Registered user %s", user.id)
    return user


async def authenticate_user(db: AsyncSession, payload: LoginRequest) -> UserSummary:
    if not payload.email or not payload.password:
        raise ValidationError("Enter email and password")

    user = await get_user_by_email(db, payload.email)
    if not user:
        raise ValidationError("Email not found")

    if not await run_in_threadpool(verify_password, payload.password, user.hashed_password):
        raise ValidationError("Invalid email or password")

    return UserSummary(user_id=user.id, email=user.email)
