"""Dev-only session authentication.

The /dev/login routes are only available when settings.environment !=
"production". Real identity providers are wired in front of the app.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from shrine.config import settings
from shrine.database import get_db
from shrine.models import User
from shrine.rendering import templates

router = APIRouter()


def _is_dev() -> bool:
    return settings.environment != "production"


@router.get("/dev/login", response_class=HTMLResponse)
async def dev_login_page(request: Request, db: AsyncSession = Depends(get_db)) -> HTMLResponse:
    """Show the dev login page with all seeded users."""
    if not _is_dev():
        raise HTTPException(status_code=404)
    result = await db.execute(select(User).order_by(User.display_name))
    users = result.scalars().all()
    return templates.TemplateResponse(request, "dev_login.html", {"users": users})


@router.post("/dev/login")
async def dev_login(
    request: Request,
    user_id: int = Form(...),
    db: AsyncSession = Depends(get_db),
) -> RedirectResponse:
    """Set the session to the chosen user and redirect to the roller."""
    if not _is_dev():
        raise HTTPException(status_code=404)
    if await db.get(User, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    request.session["user_id"] = user_id
    return RedirectResponse(url="/", status_code=303)


@router.post("/dev/logout")
async def dev_logout(request: Request) -> RedirectResponse:
    """Clear the session and redirect to /dev/login."""
    if not _is_dev():
        raise HTTPException(status_code=404)
    request.session.clear()
    return RedirectResponse(url="/dev/login", status_code=303)
