"""Sprint field parsing and sprint-change history counting."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from sprint_spillover.core.config import SPRINT_HISTORY_FIELD
from sprint_spillover.core.models import HistoryItemModel, SprintRef

logger = logging.getLogger(__name__)

# Legacy GreenHopper serialisation, e.g.
# com.atlassian.greenhopper.service.sprint.Sprint@1f2e[id=7,rapidViewId=3,state=CLOSED,name=Sprint 7,...]
_LEGACY_BODY = re.compile(r"\[(?P<body>.*)\]\s*$", re.DOTALL)
_LEGACY_NAME = re.compile(r"(?:^|,)name=(?P<name>.*?)(?=,[A-Za-z]+=|$)", re.DOTALL)
_LEGACY_ID = re.compile(r"(?:^|,)id=(?P<id>\d+)")


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_sprint(value: Any) -> SprintRef | None:
    """Parse one entry of the sprint custom field.

    Accepts the Cloud JSON object (``{"id": 7, "name": "Sprint 7"}``) and the
    legacy bracketed string. Returns None when no sprint name can be found.
    """
    if isinstance(value, dict):
        name = str(value.get("name") or "").strip()
        if not name:
            logger.debug("Sprint object without a name: %r", value)
            return None
        return SprintRef(_to_int(value.get("id")), name)

    if not isinstance(value, str):
        logger.debug("Unsupported sprint value type: %r", type(value))
        return None

    match = _LEGACY_BODY.search(value)
    body = match.group("body") if match else value
    name_match = _LEGACY_NAME.search(body)
    if not name_match:
        logger.debug("Sprint string without a name token: %r", value)
        return None
    name = name_match.group("name").strip()
    if not name or name == "<null>":
        return None
    id_match = _LEGACY_ID.search(body)
    return SprintRef(_to_int(id_match.group("id")) if id_match else None, name)


def parse_sprint_field(raw: Any) -> tuple[SprintRef, ...]:
    """Parse the whole sprint field, de-duplicating by name (first seen wins)."""
    if raw is None:
        return ()
    values = raw if isinstance(raw, list) else [raw]
    seen: set[str] = set()
    out: list[SprintRef] = []
    for value in values:
        ref = parse_sprint(value)
        if ref is None or ref.name in seen:
            continue
        seen.add(ref.name)
        out.append(ref)
    return tuple(out)


def count_sprint_changes(histories: Iterable[HistoryItemModel]) -> int:
    """Count changelog items touching the sprint field, in either direction."""
    total = 0
    for entry in histories:
        for item in entry.items or []:
            field_name = str(item.get("field") or "").lower()
            if field_name == SPRINT_HISTORY_FIELD:
                total += 1
    return total
