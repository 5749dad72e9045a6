"""Route registration for the InterviewPrep web UI."""

from __future__ import annotations

from fastapi import FastAPI


def register_routes(app: FastAPI):
    """Include all route modules."""
    from interviewprep.web.routes import checklist, dashboard

    app.include_router(checklist.router)
    app.include_router(dashboard.router)
