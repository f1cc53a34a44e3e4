from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import select
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request

from shrine import models as _models  # noqa: F401 - registers models with Base.metadata
from shrine.config import settings
from shrine.database import AsyncSessionLocal, Base, engine
from shrine.errors import DomainError, InvalidRoll, NotFound
from shrine.models import User
from shrine.routers import actors, auth, dice, pages

logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)

_DEV_USERS = ["Alice", "Bob", "Charlie"]

_ERROR_STATUS: dict[type[DomainError], int] = {
    InvalidRoll: 400,
    NotFound: 404,
}


async def _seed_dev_users() -> None:
    """Insert named dev users if they don't already exist."""
    async with AsyncSessionLocal() as session:
        for name in _DEV_USERS:
            result = await session.execute(select(User).where(User.display_name == name))
            if result.scalar_one_or_none() is None:
                session.add(User(display_name=name))
        await session.commit()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.environment != "production":
        await _seed_dev_users()
    yield


app = FastAPI(title="Shrine", lifespan=lifespan)

app.add_middleware(SessionMiddleware, secret_key=settings.session_secret_key)

app.include_router(pages.router)
app.include_router(auth.router)
app.include_router(actors.router)
app.include_router(dice.router)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = _ERROR_STATUS.get(type(exc), 400)
    logger.debug("%s %s failed with %s: %s", request.method, request.url.path, exc.code, exc)
    return JSONResponse(status_code=status_code, content=exc.to_dict())
