"""Load connection and field settings from YAML (with fallbacks) and the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from .config import (
    DEFAULT_SETTINGS_FILE,
    ENV_CREDENTIALS,
    ENV_SERVER,
    FIELD_IDS,
    Settings,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)

KNOWN_KEYS = frozenset({"server", "credentials_path", "page_size", "excluded_issue_types", "fields"})


def _read_yaml(yaml_path: Path) -> dict:
    try:
        data = yaml.safe_load(yaml_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read settings file {yaml_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {yaml_path} must contain a mapping")
    return data


def _apply(settings: Settings, data: dict, source: Path) -> None:
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", source, ", ".join(unknown))
    if data.get("server"):
        settings.server = str(data["server"])
    if data.get("credentials_path"):
        settings.credentials_path = str(data["credentials_path"])
    if "page_size" in data:
        try:
            page_size = int(data["page_size"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"page_size must be an integer, got {data['page_size']!r}") from exc
        if page_size <= 0:
            raise ConfigError(f"page_size must be positive, got {page_size}")
        settings.page_size = page_size
    if "excluded_issue_types" in data:
        types = data["excluded_issue_types"] or []
        if isinstance(types, str):
            types = [types]
        settings.excluded_issue_types = tuple(str(t) for t in types)
    fields = data.get("fields") or {}
    if not isinstance(fields, dict):
        raise ConfigError("fields must be a mapping of field name to Jira field id")
    for name, field_id in fields.items():
        if name not in FIELD_IDS:
            logger.warning("Ignoring unknown field mapping %r in %s", name, source)
            continue
        settings.field_ids[name] = str(field_id)


def load_settings(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Build Settings from defaults, an optional YAML file, then the environment.

    An explicit ``path`` must exist; the default ``spillover.yaml`` in the
    working directory is optional.
    """
    env = os.environ if env is None else env
    settings = Settings()
    if path is not None:
        yaml_path = Path(path)
        if not yaml_path.is_file():
            raise ConfigError(f"Settings file not found: {yaml_path}")
    else:
        yaml_path = Path(DEFAULT_SETTINGS_FILE)
    if yaml_path.is_file():
        _apply(settings, _read_yaml(yaml_path), yaml_path)

    if env.get(ENV_SERVER):
        settings.server = env[ENV_SERVER]
    if env.get(ENV_CREDENTIALS):
        settings.credentials_path = env[ENV_CREDENTIALS]
    return settings
