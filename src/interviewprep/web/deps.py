"""Dependency helpers for web routes."""

from __future__ import annotations

import logging

from fastapi import Request

from interviewprep.checklist.models import JobContext
from interviewprep.checklist.session import ChecklistSession
from interviewprep.config import ProfileConfig, load_profile
from interviewprep.storage.database import Database
from interviewprep.storage.store import SQLiteStore

log = logging.getLogger(__name__)

# Least recently used sessions are dropped past this; their records stay in the store
MAX_LIVE_SESSIONS = 32


def get_profile(slug: str | None = None) -> ProfileConfig:
    """Load profile config by slug (or default)."""
    return load_profile(slug)


def get_db(request: Request, profile: ProfileConfig) -> Database:
    """Long-lived database for a profile, initialized on first use."""
    databases = request.app.state.databases
    if profile.slug not in databases:
        db = Database(profile.db_path)
        db.initialize()
        databases[profile.slug] = db
    return databases[profile.slug]


def _register(request: Request, slot: tuple[str, str], session: ChecklistSession):
    sessions = request.app.state.sessions
    sessions[slot] = session
    sessions.move_to_end(slot)
    while len(sessions) > MAX_LIVE_SESSIONS:
        (slug, key), _ = sessions.popitem(last=False)
        log.debug("Closed idle checklist session %s in profile %s", key, slug)


def open_session(
    request: Request,
    profile: ProfileConfig,
    job: JobContext | None = None,
    role: str = "",
    company: str = "",
) -> ChecklistSession:
    """Create and load a session, replacing any live one for the same identity."""
    session = ChecklistSession(SQLiteStore(get_db(request, profile)), job=job, role=role, company=company)
    session.load()
    _register(request, (profile.slug, session.identity_key), session)
    return session


def find_session(request: Request, profile: ProfileConfig, key: str) -> ChecklistSession | None:
    """The live session for an identity key, if one is open."""
    sessions = request.app.state.sessions
    slot = (profile.slug, key)
    if slot not in sessions:
        return None
    sessions.move_to_end(slot)
    return sessions[slot]


def rekey_session(request: Request, profile: ProfileConfig, old_key: str, session: ChecklistSession):
    """Move a session whose identity key changed to its new registry slot."""
    request.app.state.sessions.pop((profile.slug, old_key), None)
    _register(request, (profile.slug, session.identity_key), session)
