"""Request-scoped dependencies for the read API."""
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession from the app's factory, auto-closes after request."""
    factory = request.app.state.session_factory
    async with factory() as session:
        yield session
