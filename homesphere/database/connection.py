from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from homesphere.config import settings
from homesphere.utils.errors import ConflictError, StorageError
import logging

logger = logging.getLogger(__name__)


def get_database_url():
    """Parse database URL and convert plain PostgreSQL URLs to the asyncpg driver"""
    original_url = make_url(settings.DATABASE_URL)

    # Already async (e.g. sqlite+aiosqlite in tests or postgresql+asyncpg)
    if original_url.drivername not in ("postgres", "postgresql", "postgresql+psycopg2"):
        return settings.DATABASE_URL

    port = original_url.port or 5432

    # Build the connection string manually to preserve special characters in password
    database_url = (
        f"postgresql+asyncpg://{original_url.username}:{original_url.password}"
        f"@{original_url.host}:{port}/{original_url.database}"
    )

    # sslmode/channel_binding are libpq options asyncpg does not understand
    query_params = {}
    if original_url.query:
        for key, value in original_url.query.items():
            if key not in ['sslmode', 'channel_binding']:
                query_params[key] = value

    if query_params:
        query_string = '&'.join([f"{k}={v}" for k, v in query_params.items()])
        database_url += f"?{query_string}"

    return database_url


def get_connect_args():
    """Get connection arguments for asyncpg, especially for SSL"""
    url = make_url(settings.DATABASE_URL)
    connect_args = {}

    if url.query and url.query.get('sslmode') == 'require':
        connect_args['ssl'] = 'require'

    return connect_args


engine = create_async_engine(
    get_database_url(),
    echo=settings.DEBUG,
    future=True,
    pool_pre_ping=True,  # Verify connections before using them
    pool_recycle=3600,  # Recycle connections after 1 hour
    connect_args=get_connect_args()
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

Base = declarative_base()


async def get_db():
    """Get database session (generator for FastAPI dependency injection)"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def close_db():
    """Close database connections"""
    await engine.dispose()


async def commit_session(session: AsyncSession, conflict_message: str = "Resource already exists") -> None:
    """Commit, turning constraint races into ConflictError and driver failures into StorageError"""
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise ConflictError(conflict_message, details=str(e.orig)) from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Commit failed: {e}")
        raise StorageError(details=str(e)) from e
