"""Mapping raw Jira issue JSON into IssueModel instances."""

from __future__ import annotations

from typing import Any

import pandas as pd

from sprint_spillover.analytics.sprints import parse_sprint_field

from .config import FIELD_IDS
from .models import HistoryItemModel, IssueModel


def parse_dt(val):
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _name_of(value: Any, attr: str = "name") -> str | None:
    if not isinstance(value, dict):
        return None
    text = value.get(attr)
    return str(text) if text else None


def _story_points(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _epic_key(fields: dict[str, Any], link_field: str) -> str | None:
    link = fields.get(link_field)
    if isinstance(link, dict):
        link = link.get("key")
    if isinstance(link, str) and link.strip():
        return link.strip()
    # Next-gen projects link the epic through the parent field instead
    parent = fields.get("parent")
    if isinstance(parent, dict):
        parent_type = _name_of((parent.get("fields") or {}).get("issuetype"))
        key = parent.get("key")
        if isinstance(key, str) and key.strip() and parent_type in (None, "Epic"):
            return key.strip()
    return None


def map_issue(raw: dict[str, Any], field_ids: dict[str, str] | None = None) -> IssueModel:
    ids = field_ids or FIELD_IDS
    fields = raw.get("fields") or {}

    histories_raw = (raw.get("changelog") or {}).get("histories", []) or []
    histories = tuple(HistoryItemModel(items=list(h.get("items") or [])) for h in histories_raw)

    return IssueModel(
        key=raw.get("key") or "",
        summary=fields.get("summary"),
        status=_name_of(fields.get("status")),
        issuetype=_name_of(fields.get("issuetype")),
        assignee=_name_of(fields.get("assignee"), "displayName") if fields.get("assignee") else None,
        resolution_date=parse_dt(fields.get("resolutiondate")),
        sprints=parse_sprint_field(fields.get(ids["sprint"])),
        epic_key=_epic_key(fields, ids["epic_link"]),
        story_points=_story_points(fields.get(ids["story_points"])),
        histories=histories,
    )
