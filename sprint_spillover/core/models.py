"""Domain data models for credentials, search filters, issues, and report rows."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime

from .config import (
    DEFAULT_EXCLUDED_ISSUE_TYPES,
    DEFAULT_RECENCY_DAYS,
    LOOKUP_FAILED,
    NO_PARENT,
    NO_TITLE,
)


@dataclass(slots=True, frozen=True)
class Credential:
    raw: str = field(repr=False)

    def authorization_header(self) -> str:
        token = base64.b64encode(self.raw.encode("utf-8")).decode("ascii")
        return f"Basic {token}"


def coerce_recency_days(value) -> int:
    """Parse a recency window, falling back to the default on bad input."""
    if value is None:
        return DEFAULT_RECENCY_DAYS
    try:
        days = int(str(value).strip())
    except ValueError:
        return DEFAULT_RECENCY_DAYS
    return days if days > 0 else DEFAULT_RECENCY_DAYS


def _quote_jql(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(slots=True, frozen=True)
class SearchFilter:
    project_key: str
    excluded_issue_types: tuple[str, ...] = tuple(DEFAULT_EXCLUDED_ISSUE_TYPES)
    recency_days: int = DEFAULT_RECENCY_DAYS

    def __post_init__(self):
        if not self.project_key or not self.project_key.strip():
            raise ValueError("project_key is required")
        if self.recency_days <= 0:
            raise ValueError(f"recency_days must be positive, got {self.recency_days}")

    def to_jql(self) -> str:
        clauses = [f"project = {_quote_jql(self.project_key.strip())}"]
        if self.excluded_issue_types:
            types = ", ".join(_quote_jql(t) for t in self.excluded_issue_types)
            clauses.append(f"issuetype not in ({types})")
        clauses.append(f"updated >= -{self.recency_days}d")
        return " AND ".join(clauses)


@dataclass(slots=True, frozen=True)
class SprintRef:
    sprint_id: int | None
    name: str


@dataclass(slots=True)
class HistoryItemModel:
    items: list[dict] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class IssueModel:
    key: str
    summary: str | None
    status: str | None
    issuetype: str | None
    assignee: str | None
    resolution_date: datetime | None
    sprints: tuple[SprintRef, ...] = ()
    epic_key: str | None = None
    story_points: float | None = None
    histories: tuple[HistoryItemModel, ...] = ()


@dataclass(slots=True, frozen=True)
class SpilloverCandidate:
    issue: IssueModel
    worked_sprint_count: int
    sprint_change_count: int
    epic_key: str | None
    resolution_date: datetime | None
    age_days: int | None = None


@dataclass(slots=True, frozen=True)
class EpicTitle:
    """Outcome of an epic title lookup.

    ``kind`` is one of ``resolved``, ``no_title``, ``lookup_failed`` or
    ``no_parent``; only ``resolved`` carries ``text``.
    """

    kind: str
    text: str | None = None

    @classmethod
    def resolved(cls, text: str) -> EpicTitle:
        return cls("resolved", text)

    @classmethod
    def no_title(cls) -> EpicTitle:
        return cls("no_title")

    @classmethod
    def lookup_failed(cls) -> EpicTitle:
        return cls("lookup_failed")

    @classmethod
    def no_parent(cls) -> EpicTitle:
        return cls("no_parent")

    def display(self) -> str:
        if self.kind == "resolved" and self.text:
            return self.text
        if self.kind == "no_parent":
            return NO_PARENT
        if self.kind == "lookup_failed":
            return LOOKUP_FAILED
        return NO_TITLE


@dataclass(slots=True, frozen=True)
class ReportRow:
    worked_sprint_count: int
    sprint_change_count: int
    issuetype: str
    key: str
    summary: str
    status: str
    epic_key: str
    epic_title: str
    story_points: str
    assignee: str

    def as_cells(self) -> list[str]:
        return [
            str(self.worked_sprint_count),
            str(self.sprint_change_count),
            self.issuetype,
            self.key,
            self.summary,
            self.status,
            self.epic_key,
            self.epic_title,
            self.story_points,
            self.assignee,
        ]
