"""Checklist session: generation, persistence, and interaction for one identity.

A session is scoped to an identity key (the job id, or ``role:company`` when
there is no job). It keeps two independent records in the store:

- the content record, the flattened item list with completion flags
- the settings record, the last chosen seniority and culture

Store failures and malformed records are logged and never raised; the
in-memory state stays authoritative for the rest of the session.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict

from interviewprep.checklist.generator import generate as generate_checklist
from interviewprep.checklist.models import ChecklistItem, GenerationContext, JobContext
from interviewprep.config import CONTENT_KEY_PREFIX, SETTINGS_KEY_PREFIX
from interviewprep.storage.store import KeyValueStore, StoreError

log = logging.getLogger(__name__)

SETTINGS_FIELDS = ("seniority", "culture")


def identity_key(job: JobContext | None = None, role: str = "", company: str = "") -> str:
    """Job id when there is one, else ``role:company``."""
    if job is not None and job.id:
        return str(job.id)
    return f"{role}:{company}"


def content_key(identity: str) -> str:
    return f"{CONTENT_KEY_PREFIX}{identity}"


def settings_key(identity: str) -> str:
    return f"{SETTINGS_KEY_PREFIX}{identity}"


def compute_progress(items: list[ChecklistItem]) -> int:
    """Completed share as a whole percentage, halves rounded up; 0 when empty."""
    if not items:
        return 0
    done = sum(1 for item in items if item.completed)
    return int(math.floor(done * 100 / len(items) + 0.5))


class ChecklistSession:
    """Stateful controller for one checklist at a time."""

    def __init__(
        self,
        store: KeyValueStore,
        job: JobContext | None = None,
        role: str = "",
        company: str = "",
    ):
        self.store = store
        self.job = job
        self.role = role or (job.title if job and job.title else "")
        self.company = company or (job.company if job and job.company else "")
        self.seniority = ""
        self.culture = ""
        self.items: list[ChecklistItem] = []
        self.expanded: dict[str, bool] = {}
        self.has_auto_generated = False

    # ── Identity ───────────────────────────────────────────────────

    @property
    def identity_key(self) -> str:
        return identity_key(self.job, self.role, self.company)

    @property
    def content_key(self) -> str:
        return content_key(self.identity_key)

    @property
    def settings_key(self) -> str:
        return settings_key(self.identity_key)

    def set_identity(self, role: str, company: str):
        """Change role/company; reloads when the identity key changes."""
        before = self.identity_key
        self.role = role
        self.company = company
        if self.identity_key != before:
            self.has_auto_generated = False
            self.load()

    # ── Store access (never raises) ────────────────────────────────

    def _read(self, key: str) -> str | None:
        try:
            return self.store.get(key)
        except StoreError as e:
            log.warning("Could not read %s: %s", key, e)
            return None

    def _write(self, key: str, value: str):
        try:
            self.store.set(key, value)
        except StoreError as e:
            log.warning("Could not save %s: %s", key, e)

    def _remove(self, key: str):
        try:
            self.store.remove(key)
        except StoreError as e:
            log.warning("Could not remove %s: %s", key, e)

    def _read_settings(self) -> dict:
        raw = self._read(self.settings_key)
        if not raw:
            return {}
        try:
            settings = json.loads(raw)
        except json.JSONDecodeError:
            log.warning("Ignoring malformed settings record %s", self.settings_key)
            return {}
        if not isinstance(settings, dict):
            log.warning("Ignoring malformed settings record %s", self.settings_key)
            return {}
        return settings

    def _read_content(self) -> list[ChecklistItem] | None:
        raw = self._read(self.content_key)
        if not raw:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError("content record is not a list")
            return [ChecklistItem.from_dict(entry) for entry in data]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            log.warning("Treating malformed content record %s as absent: %s", self.content_key, e)
            return None

    def _save_items(self):
        self._write(self.content_key, json.dumps([item.to_dict() for item in self.items]))

    def _save_setting(self, name: str, value: str):
        settings = self._read_settings()
        settings[name] = value
        self._write(self.settings_key, json.dumps(settings))

    # ── Operations ─────────────────────────────────────────────────

    def load_settings(self):
        """Adopt saved seniority and culture, keeping current values where none are saved."""
        settings = self._read_settings()
        for name in SETTINGS_FIELDS:
            if settings.get(name):
                setattr(self, name, str(settings[name]))

    def load(self):
        """Adopt stored settings and content; auto-generate once for a job without content."""
        self.load_settings()

        stored = self._read_content()
        if stored is not None:
            self.items = stored
            self.has_auto_generated = True
        elif self.job is not None and not self.has_auto_generated:
            log.info("No saved checklist for %s, generating one", self.identity_key)
            self.generate()
            self.has_auto_generated = True
        else:
            self.items = []
        self._sync_expanded()

    def context(self) -> GenerationContext:
        return GenerationContext(
            role=self.role,
            seniority=self.seniority,
            company=self.company,
            culture=self.culture,
            job_title=(self.job.title or "") if self.job else "",
            job_description=(self.job.description or "") if self.job else "",
        )

    def generate(self):
        """Replace the checklist with a freshly generated one (completion is reset)."""
        checklist = generate_checklist(self.context())
        self.items = checklist.flat_items
        self._save_items()
        self._sync_expanded()
        log.debug("Generated %d items for %s", len(self.items), self.identity_key)

    def toggle_item(self, item_id: str) -> bool:
        """Flip one item's completed flag. Returns False for an unknown id."""
        for item in self.items:
            if item.id == item_id:
                item.completed = not item.completed
                self._save_items()
                return True
        return False

    def toggle_group(self, title: str):
        self.expanded[title] = not self.expanded.get(title, False)

    def clear(self):
        """Delete both records and return to the never-generated state."""
        self._remove(self.content_key)
        self._remove(self.settings_key)
        self.items = []
        self.seniority = ""
        self.culture = ""
        self.has_auto_generated = False
        self._sync_expanded()

    def set_seniority(self, value: str):
        self.seniority = value
        self._save_setting("seniority", value)

    def set_culture(self, value: str):
        self.culture = value
        self._save_setting("culture", value)

    def progress(self) -> int:
        return compute_progress(self.items)

    # ── Presentation ───────────────────────────────────────────────

    def grouped(self) -> dict[str, list[ChecklistItem]]:
        """Items by group title, groups in first-seen order."""
        groups: dict[str, list[ChecklistItem]] = {}
        for item in self.items:
            groups.setdefault(item.group, []).append(item)
        return groups

    def _sync_expanded(self):
        present = self.grouped()
        self.expanded = {
            title: self.expanded.get(title, True) for title in present
        }

    def view(self) -> dict:
        """Everything a renderer needs, as plain data."""
        groups = []
        for title, items in self.grouped().items():
            groups.append({
                "title": title,
                "expanded": self.expanded.get(title, True),
                "items": [
                    {"id": i.id, "title": i.title, "detail": i.detail, "completed": i.completed}
                    for i in items
                ],
            })

        if self.job is not None:
            empty_message = "Click 'Generate Checklist' to create your interview preparation plan."
        else:
            empty_message = "No checklist generated yet. Enter role & company and click Generate."

        return {
            "identity_key": self.identity_key,
            "role": self.role,
            "company": self.company,
            "seniority": self.seniority,
            "culture": self.culture,
            "job": asdict(self.job) if self.job is not None else None,
            "groups": groups,
            "progress": self.progress(),
            "expanded": dict(self.expanded),
            "has_items": bool(self.items),
            "action_label": "Regenerate Checklist" if self.items else "Generate Checklist",
            "empty_message": empty_message,
        }
