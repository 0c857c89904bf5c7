from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
from sophrosyne.core.config import settings
from sophrosyne.db.base import Base
from sophrosyne.db import models  # noqa: F401

engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

async def init_db(bind: AsyncEngine | None = None):
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def get_db():
    async with SessionLocal() as db:
        yield db
