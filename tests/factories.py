"""Builders for raw Jira issue payloads and a fake JiraAPI used across tests."""

from __future__ import annotations

from datetime import datetime

import requests

from sprint_spillover.core.config import FIELD_IDS
from sprint_spillover.core.jira_client import JiraAPI


def legacy_sprint(sprint_id: int, name: str, state: str = "CLOSED") -> str:
    return (
        "com.atlassian.greenhopper.service.sprint.Sprint@5c1d0a"
        f"[id={sprint_id},rapidViewId=12,state={state},name={name},"
        "startDate=2024-09-01T10:00:00.000Z,endDate=2024-09-14T10:00:00.000Z,"
        f"completeDate=<null>,sequence={sprint_id},goal=]"
    )


def sprint_history(created: str = "2024-09-10T10:00:00.000+0000", changes: int = 1) -> dict:
    return {
        "author": {"displayName": "Scrum Master"},
        "created": created,
        "items": [
            {"field": "Sprint", "fromString": "Sprint 1", "toString": "Sprint 2"} for _ in range(changes)
        ],
    }


def raw_issue(
    key: str,
    *,
    sprints: list | None = None,
    sprint_changes: int = 0,
    resolved: datetime | None = None,
    epic: str | None = None,
    points=None,
    assignee: str | None = "Alice",
    status: str | None = "In Progress",
    issuetype: str | None = "Story",
    summary: str = "Do the thing",
    extra_histories: list | None = None,
) -> dict:
    fields = {
        "summary": summary,
        "status": {"name": status} if status else None,
        "issuetype": {"name": issuetype} if issuetype else None,
        "assignee": {"displayName": assignee} if assignee else None,
        "resolutiondate": resolved.strftime("%Y-%m-%dT%H:%M:%S.000+0000") if resolved else None,
        FIELD_IDS["sprint"]: sprints,
        FIELD_IDS["epic_link"]: epic,
        FIELD_IDS["story_points"]: points,
    }
    histories = [sprint_history() for _ in range(sprint_changes)]
    histories.extend(extra_histories or [])
    return {"key": key, "fields": fields, "changelog": {"histories": histories}}


class DummyAPI(JiraAPI):
    """In-memory stand-in for JiraAPI recording every call."""

    def __init__(self, issues=None, epics=None, fail_epics=(), fail_search_at=None, summaries=None):
        self.server = "https://example.atlassian.net"
        self.issues = list(issues or [])
        self.epics = dict(epics or {})
        self.summaries = dict(summaries or {})
        self.fail_epics = set(fail_epics)
        self.fail_search_at = fail_search_at
        self.search_calls: list[tuple[str, int, int]] = []
        self.issue_calls: list[str] = []
        self.issue_fields: list[list[str] | None] = []

    def search_page(self, jql, start_at, max_results, fields=None, expand=None):
        self.search_calls.append((jql, start_at, max_results))
        if self.fail_search_at is not None and start_at >= self.fail_search_at:
            raise RuntimeError("GET /rest/api/2/search failed 503: Service Unavailable")
        page = self.issues[start_at : start_at + max_results]
        return {"startAt": start_at, "maxResults": max_results, "total": len(self.issues), "issues": page}

    def fetch_issue_raw(self, issue_key, fields=None):
        self.issue_calls.append(issue_key)
        self.issue_fields.append(fields)
        if issue_key in self.fail_epics:
            raise RuntimeError(f"GET /rest/api/2/issue/{issue_key} failed: {requests.ConnectionError('reset')}")
        if issue_key in self.summaries:
            return {"key": issue_key, "fields": {"summary": self.summaries[issue_key]}}
        if issue_key not in self.epics:
            return {"key": issue_key, "fields": {}}
        return {"key": issue_key, "fields": {FIELD_IDS["epic_name"]: self.epics[issue_key]}}
