"""Configuration and constants for InterviewPrep."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DATA_DIR = PROJECT_ROOT / "data"
DB_FILENAME = "interviewprep.db"

# Profile registry path
PROFILES_JSON_PATH = PROJECT_ROOT / "profiles.json"

DEFAULT_PROFILE_SLUG = "default"
DEFAULT_PROFILE_NAME = "Default"

# Selectable generation settings (empty string means "not chosen")
SENIORITY_LEVELS = ["Intern", "Junior", "Mid", "Senior", "Staff/Principal"]
CULTURE_OPTIONS = ["Startup / Casual", "Corporate / Formal", "Hybrid / Mixed"]

# Durable store key families, suffixed with the identity key
CONTENT_KEY_PREFIX = "checklist:content:"
SETTINGS_KEY_PREFIX = "checklist:settings:"


@dataclass
class ProfileConfig:
    """A named profile: one data directory holding its database and exports."""

    slug: str
    name: str
    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)

    @property
    def db_path(self) -> Path:
        return self.data_dir / DB_FILENAME

    @property
    def exports_dir(self) -> Path:
        return self.data_dir / "exports"

    def ensure_dirs(self):
        """Create the profile's directories if they don't exist."""
        self.exports_dir.mkdir(parents=True, exist_ok=True)


def _load_registry() -> dict:
    """Load the profiles.json registry file."""
    if PROFILES_JSON_PATH.exists():
        return json.loads(PROFILES_JSON_PATH.read_text())
    return {"default": DEFAULT_PROFILE_SLUG, "profiles": {}}


def _save_registry(registry: dict):
    PROFILES_JSON_PATH.write_text(json.dumps(registry, indent=2) + "\n")


def load_profile(slug: str | None = None) -> ProfileConfig:
    """Load a profile by slug. If slug is None, use the default."""
    registry = _load_registry()
    slug = slug or registry.get("default") or DEFAULT_PROFILE_SLUG

    entry = registry.get("profiles", {}).get(slug)
    if entry is not None:
        return ProfileConfig(slug=slug, name=entry["name"], data_dir=PROJECT_ROOT / entry["data_dir"])

    # The built-in profile works even without profiles.json
    if slug == DEFAULT_PROFILE_SLUG:
        return ProfileConfig(slug=DEFAULT_PROFILE_SLUG, name=DEFAULT_PROFILE_NAME)

    raise ValueError(f"Unknown profile: {slug}")


def list_profiles() -> list[dict]:
    """Registered profiles as dicts, flagged with which one is the default."""
    registry = _load_registry()
    default = registry.get("default", "")
    return [
        {"slug": slug, "name": entry["name"], "data_dir": entry["data_dir"], "is_default": slug == default}
        for slug, entry in registry.get("profiles", {}).items()
    ]


def create_profile(slug: str, name: str) -> ProfileConfig:
    """Register a new profile under data/profiles/<slug> and create its directories."""
    registry = _load_registry()
    profiles = registry.setdefault("profiles", {})

    if slug in profiles or slug == DEFAULT_PROFILE_SLUG:
        raise ValueError(f"Profile '{slug}' already exists")

    data_dir = f"data/profiles/{slug}"
    profiles[slug] = {"name": name, "data_dir": data_dir}
    registry.setdefault("default", slug)
    _save_registry(registry)

    config = ProfileConfig(slug=slug, name=name, data_dir=PROJECT_ROOT / data_dir)
    config.ensure_dirs()
    return config


def set_default_profile(slug: str):
    """Set the default profile in the registry."""
    registry = _load_registry()
    if slug not in registry.get("profiles", {}):
        raise ValueError(f"Unknown profile: {slug}")
    registry["default"] = slug
    _save_registry(registry)
