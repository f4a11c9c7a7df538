"""Async SQLAlchemy engine and session factory for the scenario store."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from config.settings import settings

_LOCAL_HOSTS = ("localhost", "127.0.0.1")
_ASYNC_SCHEME = "postgresql+psycopg://"


def async_database_url(url: str) -> str:
    """Rewrite a Postgres URL for the async psycopg driver.

    Remote hosts get ``sslmode=require`` unless the URL already sets it.
    """
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            url = _ASYNC_SCHEME + url[len(scheme):]
            break

    host = url.rsplit("@", 1)[-1].split("/")[0].split(":")[0] if "@" in url else ""
    if host and host not in _LOCAL_HOSTS and "sslmode" not in url:
        url += ("&" if "?" in url else "?") + "sslmode=require"
    return url


def build_engine(url: str = settings.database_url) -> AsyncEngine:
    return create_async_engine(async_database_url(url), echo=False, pool_pre_ping=True)


engine = build_engine()

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:
    """Yield an async database session."""
    async with async_session() as session:
        yield session
