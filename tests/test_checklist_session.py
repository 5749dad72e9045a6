"""Tests for interviewprep.checklist.session."""

from __future__ import annotations

import json
import logging

import pytest

from interviewprep.checklist.models import ChecklistItem, JobContext
from interviewprep.checklist.session import (
    ChecklistSession,
    compute_progress,
    content_key,
    identity_key,
    settings_key,
)
from interviewprep.storage.store import MemoryStore


class CountingStore(MemoryStore):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


def _items(*flags: bool) -> list[ChecklistItem]:
    return [ChecklistItem(id=f"i{n}", title="t", detail="d", group="g", completed=f) for n, f in enumerate(flags)]


class TestKeys:
    def test_job_id_wins(self, sample_job):
        assert identity_key(sample_job, "Anything", "Else") == "job-42"

    def test_role_company_without_job_id(self):
        assert identity_key(JobContext(title="Engineer"), "Engineer", "Acme") == "Engineer:Acme"
        assert identity_key(None, "Engineer", "Acme") == "Engineer:Acme"

    def test_key_families(self):
        assert content_key("job-42") == "checklist:content:job-42"
        assert settings_key("job-42") == "checklist:settings:job-42"


class TestProgress:
    def test_empty(self):
        assert compute_progress([]) == 0

    def test_fractions(self):
        assert compute_progress(_items(True, False, False)) == 33
        assert compute_progress(_items(True, True, False)) == 67
        assert compute_progress(_items(True, True)) == 100

    def test_half_rounds_up(self):
        assert compute_progress(_items(True, *[False] * 7)) == 13


class TestLoad:
    def test_manual_without_content_is_empty(self, store):
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.load()
        assert session.items == []
        assert session.has_auto_generated is False
        assert store.data == {}

    def test_job_auto_generates_once(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()

        assert session.has_auto_generated is True
        assert len(session.items) == 25
        stored = json.loads(store.get("checklist:content:job-42"))
        assert [d["id"] for d in stored] == [i.id for i in session.items]

    def test_guard_blocks_second_auto_generation(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        store.remove("checklist:content:job-42")

        session.load()
        assert session.items == []
        assert store.get("checklist:content:job-42") is None

    def test_adopts_stored_content_verbatim(self, store, sample_job):
        saved = [
            {"id": "custom", "title": "Custom task", "detail": "x", "group": "Mine", "completed": True},
        ]
        store.set("checklist:content:job-42", json.dumps(saved))

        session = ChecklistSession(store, job=sample_job)
        session.load()

        assert [i.to_dict() for i in session.items] == saved
        assert session.has_auto_generated is True
        assert session.progress() == 100

    def test_adopts_saved_settings(self, store):
        store.set("checklist:settings:Engineer:Acme", json.dumps({"seniority": "Senior", "culture": "Hybrid / Mixed"}))
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.load()
        assert session.seniority == "Senior"
        assert session.culture == "Hybrid / Mixed"

    def test_malformed_content_treated_as_absent(self, store, sample_job, caplog):
        store.set("checklist:content:job-42", "{not json")
        session = ChecklistSession(store, job=sample_job)

        with caplog.at_level(logging.WARNING):
            session.load()

        assert "malformed content record" in caplog.text
        assert len(session.items) == 25

    def test_wrong_shape_content_treated_as_absent(self, store):
        store.set("checklist:content:Engineer:Acme", json.dumps({"id": "x"}))
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.load()
        assert session.items == []

    def test_malformed_settings_ignored(self, store):
        store.set("checklist:settings:Engineer:Acme", "[1, 2")
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.load()
        assert session.seniority == ""


class TestGenerate:
    def test_uses_job_description(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.generate()
        ids = [i.id for i in session.items]
        assert ids[:4] == ["resp:leadership", "tech:aws", "tech:node", "tech:react"]

    def test_uses_settings(self, store):
        session = ChecklistSession(store, role="Software Engineer", company="Acme")
        session.set_seniority("Staff/Principal")
        session.set_culture("Corporate / Formal")
        session.generate()

        by_id = {i.id: i for i in session.items}
        assert by_id["tech-review"].detail.endswith("Staff/Principal")
        assert by_id["attire"].title == "Business formal recommended"
        assert by_id["company-mission"].detail == "Know what Acme builds and why"

    def test_regeneration_resets_completion(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        first = json.loads(store.get(session.content_key))
        session.toggle_item("tech:react")
        session.toggle_item("thank-you")

        session.generate()
        second = json.loads(store.get(session.content_key))

        assert all(d["completed"] is False for d in second)
        assert second == first
        assert session.progress() == 0


class TestToggle:
    def test_toggle_persists(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()

        assert session.toggle_item("coding-practice") is True
        stored = {d["id"]: d["completed"] for d in json.loads(store.get(session.content_key))}
        assert stored["coding-practice"] is True
        assert sum(stored.values()) == 1

    def test_double_toggle_restores(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        before = [i.to_dict() for i in session.items]

        session.toggle_item("attire")
        session.toggle_item("attire")

        assert [i.to_dict() for i in session.items] == before

    def test_unknown_id_is_noop(self, sample_job):
        store = CountingStore()
        session = ChecklistSession(store, job=sample_job)
        session.load()
        writes = store.writes

        assert session.toggle_item("nope") is False
        assert store.writes == writes

    def test_progress_after_toggle(self, store):
        session = ChecklistSession(store, role="Accountant", company="Acme")
        session.generate()
        assert len(session.items) == 19
        for item in session.items[:10]:
            session.toggle_item(item.id)
        assert session.progress() == 53


class TestGroups:
    def test_all_groups_expanded_by_default(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        assert len(session.expanded) == 8
        assert all(session.expanded.values())

    def test_toggle_group_is_memory_only(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        snapshot = dict(store.data)

        session.toggle_group("Logistics")
        assert session.expanded["Logistics"] is False
        assert store.data == snapshot

        session.toggle_group("Logistics")
        assert session.expanded["Logistics"] is True

    def test_collapse_survives_toggle_item(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        session.toggle_group("Logistics")
        session.toggle_item("confirm-time")
        assert session.expanded["Logistics"] is False

    def test_stale_groups_dropped(self, store):
        store.set("checklist:content:a:b", json.dumps([
            {"id": "x", "title": "X", "detail": "", "group": "Only", "completed": False},
        ]))
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.generate()
        session.set_identity("a", "b")
        assert session.expanded == {"Only": True}


class TestClear:
    def test_removes_both_records(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        session.set_seniority("Senior")

        session.clear()

        assert store.get("checklist:content:job-42") is None
        assert store.get("checklist:settings:job-42") is None
        assert session.items == []
        assert session.seniority == ""
        assert session.culture == ""
        assert session.has_auto_generated is False

    def test_load_after_clear_behaves_as_new(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        session.toggle_item("tech-review")
        session.clear()

        session.load()
        assert len(session.items) == 25
        assert session.progress() == 0

    def test_manual_load_after_clear_is_empty(self, store):
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.generate()
        session.clear()
        session.load()
        assert session.items == []


class TestSettings:
    def test_settings_independent_of_content(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        content = store.get(session.content_key)

        session.set_seniority("Junior")
        session.set_culture("Startup / Casual")

        assert store.get(session.content_key) == content
        assert json.loads(store.get(session.settings_key)) == {
            "seniority": "Junior",
            "culture": "Startup / Casual",
        }

    def test_settings_merge(self, store):
        store.set("checklist:settings:E:A", json.dumps({"culture": "Hybrid / Mixed"}))
        session = ChecklistSession(store, role="E", company="A")
        session.set_seniority("Mid")
        assert json.loads(store.get("checklist:settings:E:A")) == {
            "culture": "Hybrid / Mixed",
            "seniority": "Mid",
        }


class TestIdentityChange:
    def test_set_identity_reloads(self, store):
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.generate()

        session.set_identity("Engineer", "Globex")
        assert session.identity_key == "Engineer:Globex"
        assert session.items == []

        session.set_identity("Engineer", "Acme")
        assert len(session.items) == 21

    def test_same_identity_keeps_state(self, store):
        session = ChecklistSession(store, role="Engineer", company="Acme")
        session.generate()
        session.toggle_group("Logistics")
        session.set_identity("Engineer", "Acme")
        assert session.expanded["Logistics"] is False


class TestStoreFailures:
    def test_write_failure_keeps_memory_state(self, failing_store, sample_job, caplog):
        session = ChecklistSession(failing_store, job=sample_job)
        with caplog.at_level(logging.WARNING):
            session.load()
            session.toggle_item("tech-review")
            session.set_culture("Startup / Casual")
            session.clear()

        assert "Could not save" in caplog.text
        assert "Could not remove" in caplog.text

    def test_toggle_survives_write_failure(self, failing_store, sample_job):
        session = ChecklistSession(failing_store, job=sample_job)
        session.load()
        session.toggle_item("tech-review")
        assert next(i for i in session.items if i.id == "tech-review").completed is True

    def test_read_failure_treated_as_absent(self, unreadable_store, sample_job, caplog):
        session = ChecklistSession(unreadable_store, job=sample_job)
        with caplog.at_level(logging.WARNING):
            session.load()
        assert "Could not read" in caplog.text
        assert len(session.items) == 25


class TestView:
    def test_view_shape(self, store, sample_job):
        session = ChecklistSession(store, job=sample_job)
        session.load()
        session.toggle_item("tech-review")
        view = session.view()

        assert view["identity_key"] == "job-42"
        assert view["has_items"] is True
        assert view["action_label"] == "Regenerate Checklist"
        assert view["progress"] == 4
        assert [g["title"] for g in view["groups"]][0] == "Role-specific"
        first = view["groups"][0]["items"][0]
        assert set(first) == {"id", "title", "detail", "completed"}
        assert view["job"]["location"] == "Berlin"

    def test_empty_view_messages(self, store, sample_job):
        manual = ChecklistSession(store, role="Engineer", company="Acme").view()
        assert manual["action_label"] == "Generate Checklist"
        assert manual["empty_message"].startswith("No checklist generated yet")

        job_view = ChecklistSession(store, job=sample_job).view()
        assert job_view["empty_message"].startswith("Click 'Generate Checklist'")


@pytest.mark.parametrize("role,company", [("", ""), ("Engineer", "")])
def test_blank_identity_still_works(store, role, company):
    session = ChecklistSession(store, role=role, company=company)
    session.generate()
    assert store.get(f"checklist:content:{role}:{company}") is not None
