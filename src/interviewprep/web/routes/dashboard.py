"""Landing routes."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from interviewprep.config import DEFAULT_PROFILE_SLUG, list_profiles

router = APIRouter()


@router.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon requests."""
    return Response(status_code=204)


@router.get("/")
async def index(request: Request):
    """Redirect to the default profile's checklist."""
    profiles = list_profiles()
    default = next((p for p in profiles if p["is_default"]), None)
    slug = default["slug"] if default else DEFAULT_PROFILE_SLUG
    return RedirectResponse(f"/{slug}/checklist", status_code=302)
