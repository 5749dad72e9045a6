"""Rule-based interview checklist synthesis.

Turns a generation context (role, seniority, company, culture, job
description) into eight canonical groups of checklist items. Pure and
deterministic: the same context always yields the same ordered list, and
missing inputs degrade to defaults instead of failing.
"""

from __future__ import annotations

import logging
import re

from interviewprep.checklist.models import (
    Checklist,
    ChecklistGroup,
    ChecklistItem,
    GenerationContext,
)
from interviewprep.checklist.rules import (
    ATTIRE_DEFAULT,
    ATTIRE_RULES,
    COMPANY_RESEARCH,
    CONFIDENCE,
    ENGINEERING_TRACK,
    FOCUS_SYSTEM_DESIGN,
    GENERIC_TRACK,
    GROUPS,
    LOGISTICS,
    PORTFOLIO,
    POST_INTERVIEW,
    QUESTIONS_TO_ASK,
    RESPONSIBILITY_RULES,
    ROLE_TRACKS,
    SYSTEM_DESIGN_RESP,
    SYSTEM_DESIGN_TECH,
    TECH_RULES,
    TECH_TEMPLATE,
    ItemTemplate,
    RoleTrack,
    Rule,
)

log = logging.getLogger(__name__)

_ML_PATTERN = re.compile(r"\b(machine learning|ml)\b")


def detect(rules: tuple[Rule, ...], text: str) -> list[Rule]:
    """Return the rules that fire on ``text``, in rule order, each at most once."""
    fired = []
    seen = set()
    for rule in rules:
        if rule.id not in seen and rule.predicate(text):
            fired.append(rule)
            seen.add(rule.id)
    return fired


def detect_technologies(description: str) -> list[str]:
    """Technology terms mentioned in a (lower-cased) job description."""
    return [rule.id.split(":", 1)[1] for rule in detect(TECH_RULES, description)]


def select_role_track(role: str) -> RoleTrack:
    """First role track whose keywords appear in the lower-cased role."""
    for track in ROLE_TRACKS:
        if track.predicate(role):
            return track
    return GENERIC_TRACK


def tech_label(tech: str) -> str:
    """Display label for a technology term: ``machine learning`` and ``ml`` read ``ML``."""
    return _ML_PATTERN.sub("ML", tech, count=1).upper()


def _item(template: ItemTemplate, **values: str) -> ChecklistItem:
    item_id, title, detail = template.render(**values)
    return ChecklistItem(id=item_id, title=title, detail=detail)


def _role_items(
    role: str,
    seniority: str,
    techs: list[str],
    resp_rules: list[Rule],
) -> list[ChecklistItem]:
    track = select_role_track(role)
    items = [_item(t, seniority=seniority or "role") for t in track.tasks]

    if track.key == ENGINEERING_TRACK:
        detected = {rule.id for rule in resp_rules} | {f"tech:{tech}" for tech in techs}
        if SYSTEM_DESIGN_RESP in detected or SYSTEM_DESIGN_TECH in detected:
            items.insert(0, _item(FOCUS_SYSTEM_DESIGN))

    dynamic = [_item(TECH_TEMPLATE, tech=tech, label=tech_label(tech)) for tech in techs]
    dynamic += [_item(rule.template) for rule in resp_rules]

    # Each dynamic item goes to the front in turn, so the last detected leads
    seen = {item.id for item in items}
    for item in dynamic:
        if item.id in seen:
            continue
        items.insert(0, item)
        seen.add(item.id)
    return items


def _attire_item(culture: str) -> ChecklistItem:
    for rule in ATTIRE_RULES:
        if rule.predicate(culture):
            return _item(rule.template)
    return _item(ATTIRE_DEFAULT)


def generate(context: GenerationContext) -> Checklist:
    """Synthesize the grouped checklist for a generation context."""
    role = (context.role or context.job_title or "").lower()
    description = (context.job_description or "").lower()
    culture = (context.culture or "").lower()

    techs = detect_technologies(description)
    resp_rules = detect(RESPONSIBILITY_RULES, description)
    log.debug(
        "Detected %d technologies and %d responsibilities for role %r",
        len(techs), len(resp_rules), role,
    )

    company = context.company or "the company"
    items_by_key = {
        "role": _role_items(role, context.seniority, techs, resp_rules),
        "company": [_item(t, company=company) for t in COMPANY_RESEARCH],
        "questions": [_item(t) for t in QUESTIONS_TO_ASK],
        "attire": [_attire_item(culture)],
        "logistics": [_item(t) for t in LOGISTICS],
        "confidence": [_item(t) for t in CONFIDENCE],
        "portfolio": [_item(t) for t in PORTFOLIO],
        "post": [_item(t) for t in POST_INTERVIEW],
    }

    groups = [ChecklistGroup(key=key, title=title, items=items_by_key[key]) for key, title in GROUPS]

    flat_items = []
    for group in groups:
        for item in group.items:
            flat_items.append(
                ChecklistItem(
                    id=item.id,
                    title=item.title,
                    detail=item.detail,
                    group=group.title,
                    completed=False,
                )
            )

    return Checklist(groups=groups, flat_items=flat_items)
