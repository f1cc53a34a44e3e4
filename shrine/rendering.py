"""Shared Jinja2 templates instance for all routers."""

from __future__ import annotations

from pathlib import Path

from fastapi.templating import Jinja2Templates
from jinja2 import Environment, FileSystemLoader, select_autoescape

_env = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html", "xml"]),
)

_env.globals["app_name"] = "Shrine"

templates = Jinja2Templates(env=_env)
