from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import PersistenceError


SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


@asynccontextmanager
async def persistence_session(
    session_factory: SessionFactory, *, operation: str
) -> AsyncIterator[AsyncSession]:
    """Open a session and turn any SQLAlchemy failure into PersistenceError"""
    try:
        async with session_factory() as session:
            yield session
    except SQLAlchemyError as e:
        raise PersistenceError(f'Failed to {operation}: {type(e).__name__}') from e
    except OSError as e:
        # asyncpg surfaces refused / dropped connections as OSError
        raise PersistenceError(f'Failed to {operation}: {e}') from e
