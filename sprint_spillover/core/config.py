"""Central configuration: Jira connection defaults, field ids, and report columns."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

# =============================================================================
# Jira Connection Settings
# =============================================================================
JIRA_DEFAULT_SERVER = "https://jira.example.com"
TIMEZONE = "UTC"
DEFAULT_CREDENTIALS_PATH = ".jira_credentials"
DEFAULT_SETTINGS_FILE = "spillover.yaml"

# Environment variables consulted before the settings file defaults
ENV_SERVER = "JIRA_SERVER"
ENV_CREDENTIALS = "SPILLOVER_CREDENTIALS"

# =============================================================================
# Search Defaults
# =============================================================================
DEFAULT_RECENCY_DAYS: int = 10
DEFAULT_PAGE_SIZE: int = 100
DEFAULT_EXCLUDED_ISSUE_TYPES: Sequence[str] = ("Epic", "Risk")

# =============================================================================
# Jira Custom Field IDs
# =============================================================================
# Greenhopper / Jira Software defaults on Server & Data Center. Cloud sites
# typically use customfield_10020 (sprint) and customfield_10016 (points).
FIELD_IDS = {
    "sprint": "customfield_10007",
    "epic_link": "customfield_10008",
    "epic_name": "customfield_10009",
    "story_points": "customfield_10002",
}

# Changelog field name recorded when sprint membership changes
SPRINT_HISTORY_FIELD = "sprint"


def fetch_fields(field_ids: dict[str, str] | None = None) -> list[str]:
    """Field list requested from the search endpoint."""
    ids = field_ids or FIELD_IDS
    return [
        "summary",
        "status",
        "issuetype",
        "assignee",
        "resolutiondate",
        "parent",
        ids["sprint"],
        ids["epic_link"],
        ids["story_points"],
    ]


# =============================================================================
# Report Output
# =============================================================================
DEFAULT_OUTPUT_FILE = "issues_output.txt"
OUTPUT_SUFFIX = ".txt"
OUTPUT_ENCODING = "utf-8"

REPORT_COLUMNS: Sequence[str] = (
    "Worked Sprints",
    "Sprint Changes",
    "Issue Type",
    "Key",
    "Summary",
    "Status",
    "Epic Key",
    "Epic Title",
    "Story Points",
    "Assignee",
)

# Display values substituted at the formatting boundary
NO_PARENT = "no parent"
LOOKUP_FAILED = "lookup failed"
NO_TITLE = "no title"
UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
UNASSIGNED = "Unassigned"
NO_MATCHES_MESSAGE = "No spillover issues found."


@dataclass(slots=True)
class Settings:
    server: str = JIRA_DEFAULT_SERVER
    credentials_path: str = DEFAULT_CREDENTIALS_PATH
    page_size: int = DEFAULT_PAGE_SIZE
    excluded_issue_types: tuple[str, ...] = tuple(DEFAULT_EXCLUDED_ISSUE_TYPES)
    field_ids: dict[str, str] = field(default_factory=lambda: dict(FIELD_IDS))


@dataclass(slots=True)
class RunConfig:
    project: str
    recency_days: int
    output_path: str
    settings: Settings = field(default_factory=Settings)
