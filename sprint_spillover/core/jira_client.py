"""Jira API client wrapper (REST v2 offset-paginated search + single-issue fetch)."""

from __future__ import annotations

from typing import Any

import requests
from jira import JIRA, JIRAError

from .models import Credential


class JiraAPI:
    def __init__(self, server: str, credential: Credential):
        self.server = server.rstrip("/")
        # The credential line is sent as-is in a Basic header; no retries so
        # failures surface on the first attempt.
        self.client = JIRA(
            options={
                "server": self.server,
                "rest_api_version": "2",
                "headers": {"Authorization": credential.authorization_header()},
            },
            get_server_info=False,
            max_retries=0,
        )

    def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        session = getattr(self.client, "_session", None)
        if session is None:
            raise RuntimeError("JIRA session unavailable")
        url = f"{self.server}{path}"
        try:
            resp = session.get(url, params=params)
        except (JIRAError, requests.RequestException) as exc:
            raise RuntimeError(f"GET {path} failed: {exc}") from exc
        if resp.status_code >= 400:
            raise RuntimeError(f"GET {path} failed {resp.status_code}: {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise RuntimeError(f"GET {path} returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise RuntimeError(f"GET {path} returned unexpected payload type {type(data)!r}")
        return data

    def search_page(
        self,
        jql: str,
        start_at: int,
        max_results: int,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
    ) -> dict[str, Any]:
        """Fetch one page of search results: ``{"total": int, "issues": [...]}``."""
        params: dict[str, Any] = {"jql": jql, "startAt": start_at, "maxResults": max_results}
        if fields:
            params["fields"] = ",".join(fields)
        if expand:
            params["expand"] = ",".join(expand)
        return self._get_json("/rest/api/2/search", params)

    def fetch_issue_raw(self, issue_key: str, fields: list[str] | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if fields:
            params["fields"] = ",".join(fields)
        return self._get_json(f"/rest/api/2/issue/{issue_key}", params)
