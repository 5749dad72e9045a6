"""FastAPI application factory for the InterviewPrep web UI."""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

WEB_DIR = Path(__file__).parent
TEMPLATES_DIR = WEB_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


# Register template globals after import
def _setup_template_globals():
    from interviewprep.config import CULTURE_OPTIONS, SENIORITY_LEVELS, list_profiles

    templates.env.globals["list_all_profiles"] = list_profiles
    templates.env.globals["seniority_levels"] = SENIORITY_LEVELS
    templates.env.globals["culture_options"] = CULTURE_OPTIONS

_setup_template_globals()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="InterviewPrep", docs_url=None, redoc_url=None)

    # Live checklist sessions by (profile, identity key), least recently used first
    app.state.sessions = OrderedDict()
    app.state.databases = {}

    # Register all routes
    from interviewprep.web.routes import register_routes

    register_routes(app)

    return app
