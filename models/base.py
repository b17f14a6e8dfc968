import logging
from typing import AsyncGenerator

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from settings.config import get_settings

# Named constraints so Alembic batch migrations on SQLite can find them
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=naming_convention)
Base = declarative_base(metadata=metadata)

logger = logging.getLogger(__name__)


def _make_engine(url: str) -> AsyncEngine:
    """
    Panel database engine: PostgreSQL through psycopg 3 in deployments,
    aiosqlite for local runs and the test suite.
    """
    options = {"future": True}
    if make_url(url).get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
    engine = create_async_engine(url, **options)
    logger.info("Database engine ready (%s)", make_url(url).get_backend_name())
    return engine


engine = _make_engine(get_settings().build_database_url())

# Services read ids, totals and relationships after commit, so objects must not expire
SessionLocal = async_sessionmaker(bind=engine, autocommit=False, autoflush=False, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request. The test suite overrides this dependency with
    sessions bound to an in-memory SQLite engine.
    """
    async with SessionLocal() as db:
        yield db
