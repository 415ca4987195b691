from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from notegraph.config import get_settings

DATABASE_URL = get_settings().database_url


def make_engine(url: str) -> AsyncEngine:
    return create_async_engine(url, connect_args={"check_same_thread": False} if "sqlite" in url else {})


def make_sessionmaker(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


engine = make_engine(DATABASE_URL)
SessionLocal = make_sessionmaker(engine)
Base = declarative_base()


async def init_models(bind: AsyncEngine = engine):
    from . import models  # noqa: F401  (registers tables on Base.metadata)
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
