# shop_service/db/init_db.py
from shop_service.db.database import engine, Base
from shop_service.db import models  # noqa: F401  registers tables on Base.metadata


async def init_db(bind=engine):
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
