"""Markdown and JSON export for saved checklists."""

from __future__ import annotations

import json
import re
from pathlib import Path

from interviewprep.checklist.session import ChecklistSession


def render_markdown(view: dict) -> str:
    """Render a session view as a Markdown task list."""
    lines = ["# Interview Preparation Checklist", ""]

    job = view.get("job")
    if job:
        header = " at ".join(part for part in (job.get("title"), job.get("company")) if part)
        if header:
            lines.append(f"**{header}**")
        if job.get("location"):
            lines.append(f"Location: {job['location']}")
    elif view.get("role") or view.get("company"):
        lines.append(f"**{view.get('role') or 'Role'}** at {view.get('company') or 'the company'}")

    if view.get("seniority"):
        lines.append(f"Seniority: {view['seniority']}")
    if view.get("culture"):
        lines.append(f"Company culture: {view['culture']}")
    lines.append(f"Progress: {view['progress']}%")

    if not view["groups"]:
        lines.append("")
        lines.append(view["empty_message"])

    for group in view["groups"]:
        lines.append("")
        lines.append(f"## {group['title']}")
        lines.append("")
        for item in group["items"]:
            mark = "x" if item["completed"] else " "
            lines.append(f"- [{mark}] **{item['title']}**")
            if item["detail"]:
                lines.append(f"  {item['detail']}")

    return "\n".join(lines) + "\n"


def export_filename(identity: str, fmt: str) -> str:
    """Filesystem-safe file name for an identity key."""
    slug = re.sub(r"[^a-z0-9]+", "-", identity.lower()).strip("-") or "checklist"
    return f"checklist-{slug}.{fmt}"


def export_checklist(session: ChecklistSession, output_dir: Path, fmt: str = "md") -> Path:
    """Write the session's checklist to ``output_dir`` as Markdown or JSON."""
    output_dir.mkdir(parents=True, exist_ok=True)
    view = session.view()
    path = output_dir / export_filename(view["identity_key"], fmt)

    if fmt == "json":
        path.write_text(json.dumps(view, indent=2, ensure_ascii=False) + "\n")
    elif fmt == "md":
        path.write_text(render_markdown(view))
    else:
        raise ValueError(f"Unsupported export format: {fmt}")
    return path
