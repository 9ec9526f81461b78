# shop_service/db/database.py
import os
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

load_dotenv()


def build_database_url() -> str:
    url = os.getenv("SHOP_DATABASE_URL")
    if url:
        return url
    if os.getenv("SHOP_DB_HOST"):
        return (
            f"postgresql+asyncpg://{os.getenv('SHOP_DB_USER')}:{os.getenv('SHOP_DB_PASSWORD')}"
            f"@{os.getenv('SHOP_DB_HOST')}:{os.getenv('SHOP_DB_PORT', '5432')}/{os.getenv('SHOP_DB_NAME')}"
        )
    return "sqlite+aiosqlite:///./shop.db"


DATABASE_URL = build_database_url()
SQL_ECHO = os.getenv("SHOP_SQL_ECHO", "false").lower() in ("1", "true", "yes")

engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)

SessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)

Base = declarative_base()


async def get_db():
    async with SessionLocal() as session:
        yield session
