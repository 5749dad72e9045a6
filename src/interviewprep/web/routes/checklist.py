"""Interview checklist routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse

from interviewprep.checklist.models import JobContext
from interviewprep.config import CULTURE_OPTIONS, SENIORITY_LEVELS
from interviewprep.storage.export import render_markdown
from interviewprep.web.app import templates
from interviewprep.web.deps import find_session, get_profile, open_session, rekey_session

log = logging.getLogger(__name__)

router = APIRouter()

_EXPIRED = (
    '<div class="rounded-lg px-4 py-3 text-sm bg-amber-50 text-amber-800 border border-amber-200 mb-4" data-flash>'
    "This checklist is no longer open. Reload the page to continue."
    "</div>"
)


def _panel(request: Request, profile, session, flash: str | None = None):
    return templates.TemplateResponse(request, "pages/_checklist_panel.html", {
        "current_profile": profile,
        "view": session.view(),
        "flash_message": flash,
    })


def _live_session(request: Request, slug: str, key: str):
    profile = get_profile(slug)
    return profile, find_session(request, profile, key)


@router.get("/{slug}/checklist")
async def checklist_page(request: Request, slug: str, role: str = "", company: str = ""):
    """Checklist page for a role and company entered by hand."""
    try:
        profile = get_profile(slug)
    except ValueError:
        return RedirectResponse("/", status_code=302)

    session = open_session(request, profile, role=role, company=company)

    return templates.TemplateResponse(request, "pages/checklist.html", {
        "current_profile": profile,
        "active_page": "checklist",
        "view": session.view(),
        "flash_message": None,
    })


@router.post("/{slug}/checklist/open")
async def checklist_open(
    request: Request,
    slug: str,
    job_id: str = Form(""),
    title: str = Form(""),
    company: str = Form(""),
    description: str = Form(""),
    location: str = Form(""),
    role: str = Form(""),
):
    """Open the checklist for a job; generates one if the job has none yet."""
    profile = get_profile(slug)
    job = JobContext(
        id=job_id or None,
        title=title or None,
        company=company or None,
        description=description or None,
        location=location or None,
    )
    session = open_session(request, profile, job=job, role=role, company=company)
    return _panel(request, profile, session)


@router.post("/{slug}/checklist/generate")
async def checklist_generate(request: Request, slug: str, key: str = Form(...)):
    """Generate or regenerate; completed tasks are reset."""
    profile, session = _live_session(request, slug, key)
    if session is None:
        return HTMLResponse(_EXPIRED, status_code=404)

    regenerating = bool(session.items)
    session.generate()
    flash = "Checklist regenerated" if regenerating else "Checklist generated"
    return _panel(request, profile, session, flash)


@router.post("/{slug}/checklist/toggle")
async def checklist_toggle(request: Request, slug: str, key: str = Form(...), item_id: str = Form(...)):
    """Flip one task's completed flag."""
    profile, session = _live_session(request, slug, key)
    if session is None:
        return HTMLResponse(_EXPIRED, status_code=404)

    if not session.toggle_item(item_id):
        log.debug("Ignoring toggle for unknown item %r", item_id)
    return _panel(request, profile, session)


@router.post("/{slug}/checklist/group")
async def checklist_group(request: Request, slug: str, key: str = Form(...), title: str = Form(...)):
    """Expand or collapse a group."""
    profile, session = _live_session(request, slug, key)
    if session is None:
        return HTMLResponse(_EXPIRED, status_code=404)

    session.toggle_group(title)
    return _panel(request, profile, session)


@router.post("/{slug}/checklist/clear")
async def checklist_clear(request: Request, slug: str, key: str = Form(...)):
    """Delete the saved checklist and settings."""
    profile, session = _live_session(request, slug, key)
    if session is None:
        return HTMLResponse(_EXPIRED, status_code=404)

    session.clear()
    return _panel(request, profile, session, "Checklist cleared")


@router.post("/{slug}/checklist/settings")
async def checklist_settings(
    request: Request,
    slug: str,
    key: str = Form(...),
    seniority: str | None = Form(None),
    culture: str | None = Form(None),
):
    """Save seniority and/or culture (values outside the known options are ignored)."""
    profile, session = _live_session(request, slug, key)
    if session is None:
        return HTMLResponse(_EXPIRED, status_code=404)

    if seniority is not None and (seniority == "" or seniority in SENIORITY_LEVELS):
        session.set_seniority(seniority)
    if culture is not None and (culture == "" or culture in CULTURE_OPTIONS):
        session.set_culture(culture)
    return _panel(request, profile, session)


@router.post("/{slug}/checklist/identity")
async def checklist_identity(
    request: Request,
    slug: str,
    key: str = Form(...),
    role: str = Form(""),
    company: str = Form(""),
):
    """Change role/company of a hand-entered checklist."""
    profile, session = _live_session(request, slug, key)
    if session is None:
        return HTMLResponse(_EXPIRED, status_code=404)

    session.set_identity(role, company)
    rekey_session(request, profile, key, session)
    return _panel(request, profile, session)


@router.get("/{slug}/checklist/state")
async def checklist_state(request: Request, slug: str, key: str = Query(...)):
    """Session view as JSON."""
    _, session = _live_session(request, slug, key)
    if session is None:
        return JSONResponse({"error": "not found"}, status_code=404)
    return JSONResponse(session.view())


@router.get("/{slug}/checklist/export")
async def checklist_export(request: Request, slug: str, key: str = Query(...)):
    """Checklist as a Markdown download."""
    _, session = _live_session(request, slug, key)
    if session is None:
        return PlainTextResponse("not found", status_code=404)
    return PlainTextResponse(
        render_markdown(session.view()),
        media_type="text/markdown",
        headers={"Content-Disposition": 'attachment; filename="interview-checklist.md"'},
    )
