"""Report rows, tab-separated rendering, and file output."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from pathlib import Path

import pandas as pd

from sprint_spillover.core.config import (
    DEFAULT_OUTPUT_FILE,
    NO_PARENT,
    NOT_AVAILABLE,
    OUTPUT_ENCODING,
    OUTPUT_SUFFIX,
    REPORT_COLUMNS,
    UNASSIGNED,
    UNKNOWN,
)
from sprint_spillover.core.errors import OutputWriteFailed
from sprint_spillover.core.models import EpicTitle, ReportRow, SpilloverCandidate

_CELL_BREAKS = re.compile(r"[\t\r\n]+")


def format_story_points(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _text_or(value: str | None, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def build_row(candidate: SpilloverCandidate, titles: Mapping[str, EpicTitle]) -> ReportRow:
    issue = candidate.issue
    if candidate.epic_key:
        title = titles.get(candidate.epic_key, EpicTitle.lookup_failed())
    else:
        title = EpicTitle.no_parent()
    return ReportRow(
        worked_sprint_count=candidate.worked_sprint_count,
        sprint_change_count=candidate.sprint_change_count,
        issuetype=_text_or(issue.issuetype, UNKNOWN),
        key=issue.key,
        summary=issue.summary or "",
        status=_text_or(issue.status, UNKNOWN),
        epic_key=candidate.epic_key or NO_PARENT,
        epic_title=title.display(),
        story_points=format_story_points(issue.story_points),
        assignee=_text_or(issue.assignee, UNASSIGNED),
    )


def build_rows(
    candidates: Iterable[SpilloverCandidate],
    titles: Mapping[str, EpicTitle],
) -> list[ReportRow]:
    return [build_row(c, titles) for c in candidates]


def rows_to_frame(rows: Iterable[ReportRow]) -> pd.DataFrame:
    records = [row.as_cells() for row in rows]
    return pd.DataFrame(records, columns=list(REPORT_COLUMNS), dtype=object)


def render_report(frame: pd.DataFrame) -> str:
    """Header line plus one tab-separated line per row, newline terminated.

    Tabs and line breaks inside cells become spaces so every record stays on
    one line; cells containing a double quote are quoted CSV-style.
    """
    cleaned = frame.replace(_CELL_BREAKS, " ", regex=True)
    return cleaned.to_csv(sep="\t", index=False, lineterminator="\n")


def normalize_output_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        return DEFAULT_OUTPUT_FILE
    if not cleaned.lower().endswith(OUTPUT_SUFFIX):
        cleaned += OUTPUT_SUFFIX
    return cleaned


def write_report(frame: pd.DataFrame, path: str | Path) -> Path:
    """Overwrite ``path`` with the rendered report."""
    out_path = Path(path)
    try:
        out_path.write_text(render_report(frame), encoding=OUTPUT_ENCODING)
    except OSError as exc:
        raise OutputWriteFailed(out_path, str(exc)) from exc
    return out_path
