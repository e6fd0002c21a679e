"""IssueService: paginated search and epic title resolution."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from .config import FIELD_IDS, Settings, fetch_fields
from .errors import EpicLookupFailed, SearchRequestFailed
from .jira_client import JiraAPI
from .mappers import map_issue
from .models import EpicTitle, IssueModel, SearchFilter

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class IssueService:
    def __init__(self, api: JiraAPI, settings: Settings | None = None):
        self.api = api
        self.settings = settings or Settings()

    @property
    def field_ids(self) -> dict[str, str]:
        return self.settings.field_ids or FIELD_IDS

    # ------------------ Search ------------------
    def fetch_all(
        self,
        search_filter: SearchFilter,
        *,
        page_size: int | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[IssueModel]:
        """Fetch every issue matching ``search_filter`` page by page.

        The first failing page aborts the whole fetch with
        ``SearchRequestFailed``; nothing fetched so far is returned.
        """
        size = page_size or self.settings.page_size
        if size <= 0:
            raise ValueError(f"page_size must be positive, got {size}")
        jql = search_filter.to_jql()
        fields = fetch_fields(self.field_ids)
        logger.debug("Searching with JQL: %s", jql)

        raw: list[dict[str, Any]] = []
        start_at = 0
        total = 0
        while True:
            try:
                data = self.api.search_page(jql, start_at, size, fields=fields, expand=["changelog"])
            except RuntimeError as exc:
                raise SearchRequestFailed(f"Search failed at offset {start_at}: {exc}") from exc
            issues = data.get("issues") or []
            try:
                total = int(data.get("total") or 0)
            except (TypeError, ValueError) as exc:
                raise SearchRequestFailed(f"Invalid total in search response: {data.get('total')!r}") from exc
            raw.extend(issues)
            if progress:
                progress(f"Fetched {len(raw)} issues (offset {start_at})", len(raw), total)
            # The server may cap maxResults below the requested size
            start_at += len(issues)
            if start_at >= total or not issues:
                break

        return [map_issue(r, self.field_ids) for r in raw]

    # ------------------ Epic Titles ------------------
    def fetch_epic_title(self, epic_key: str) -> EpicTitle:
        name_field = self.field_ids["epic_name"]
        try:
            raw = self.api.fetch_issue_raw(epic_key, fields=[name_field, "summary"])
        except RuntimeError as exc:
            raise EpicLookupFailed(epic_key, str(exc)) from exc
        fields = raw.get("fields")
        if not isinstance(fields, dict):
            raise EpicLookupFailed(epic_key, "no fields in response")
        if name_field in fields:
            title = fields.get(name_field)
        elif "summary" in fields:
            # Team-managed epics have no Epic Name field; the summary is the title
            title = fields.get("summary")
        else:
            raise EpicLookupFailed(epic_key, f"field {name_field} missing from response")
        if title is None or not str(title).strip():
            return EpicTitle.no_title()
        return EpicTitle.resolved(str(title).strip())

    def resolve_epic_titles(
        self,
        epic_keys: Iterable[str],
        *,
        progress: ProgressCallback | None = None,
    ) -> dict[str, EpicTitle]:
        """Look up each distinct epic key once; failures degrade to a sentinel."""
        keys: list[str] = []
        for key in epic_keys:
            cleaned = (key or "").strip()
            if cleaned and cleaned not in keys:
                keys.append(cleaned)

        titles: dict[str, EpicTitle] = {}
        for idx, key in enumerate(keys, start=1):
            try:
                titles[key] = self.fetch_epic_title(key)
            except EpicLookupFailed as exc:
                logger.warning("%s", exc)
                titles[key] = EpicTitle.lookup_failed()
            if progress:
                progress(f"Resolved epic {key}", idx, len(keys))
        return titles
