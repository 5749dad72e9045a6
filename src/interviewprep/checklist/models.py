"""Data models for interview checklists."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass
class JobContext:
    """Job record supplied by the hosting page or command line."""

    id: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None


@dataclass
class GenerationContext:
    role: str = ""
    seniority: str = ""
    company: str = ""
    culture: str = ""
    job_title: str = ""
    job_description: str = ""


@dataclass
class ChecklistItem:
    id: str
    title: str
    detail: str
    group: str = ""
    completed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> ChecklistItem:
        """Build an item from a stored record. Raises KeyError/TypeError on bad shape."""
        if not isinstance(data, dict):
            raise TypeError(f"Checklist item must be an object, got {type(data).__name__}")
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            detail=str(data.get("detail", "")),
            group=str(data.get("group", "")),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class ChecklistGroup:
    key: str
    title: str
    items: list[ChecklistItem] = field(default_factory=list)


@dataclass
class Checklist:
    """Generated checklist: canonical groups plus the flattened item list."""

    groups: list[ChecklistGroup]
    flat_items: list[ChecklistItem]

    @property
    def group_titles(self) -> list[str]:
        return [g.title for g in self.groups]
