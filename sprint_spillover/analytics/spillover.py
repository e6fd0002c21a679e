"""Spillover detection: issues worked across more than one sprint (pure functions)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import pytz

from sprint_spillover.core.models import IssueModel, SpilloverCandidate

from .sprints import count_sprint_changes


def age_in_days(resolution_date: datetime | None, now: datetime) -> int | None:
    """Whole days elapsed since resolution; naive timestamps are taken as UTC."""
    if resolution_date is None:
        return None
    if resolution_date.tzinfo is None:
        resolution_date = pytz.UTC.localize(resolution_date)
    if now.tzinfo is None:
        now = pytz.UTC.localize(now)
    return (now - resolution_date).days


def build_candidate(issue: IssueModel, now: datetime) -> SpilloverCandidate:
    return SpilloverCandidate(
        issue=issue,
        worked_sprint_count=len({s.name for s in issue.sprints}),
        sprint_change_count=count_sprint_changes(issue.histories),
        epic_key=issue.epic_key,
        resolution_date=issue.resolution_date,
        age_days=age_in_days(issue.resolution_date, now),
    )


def is_spillover(candidate: SpilloverCandidate, recency_days: int) -> bool:
    # A resolved issue outside the window only matched on an unrelated recent edit
    if candidate.age_days is not None and candidate.age_days > recency_days:
        return False
    return candidate.worked_sprint_count > 1 and candidate.sprint_change_count > 1


def filter_spillover(
    issues: Iterable[IssueModel],
    recency_days: int,
    *,
    now: datetime,
) -> tuple[SpilloverCandidate, ...]:
    """Return the spillover candidates in fetch order.

    Parameters
    ----------
    issues : iterable of IssueModel
        Issues as returned by the search.
    recency_days : int
        Resolved issues older than this many whole days are dropped.
    now : datetime
        Reference time, captured once per run.
    """
    candidates = (build_candidate(issue, now) for issue in issues)
    return tuple(c for c in candidates if is_spillover(c, recency_days))


def distinct_epic_keys(candidates: Iterable[SpilloverCandidate]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for c in candidates:
        key = (c.epic_key or "").strip()
        if key:
            seen.setdefault(key, None)
    return tuple(seen)
