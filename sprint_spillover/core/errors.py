"""Error types raised by the spillover pipeline."""

from __future__ import annotations


class SpilloverError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(SpilloverError):
    pass


class CredentialNotFound(SpilloverError):
    def __init__(self, path):
        super().__init__(f"Credential file not found: {path}")
        self.path = path


class SearchRequestFailed(SpilloverError):
    """A search page could not be fetched; the run cannot continue."""


class EpicLookupFailed(SpilloverError):
    def __init__(self, epic_key: str, reason: str):
        super().__init__(f"Failed to fetch epic {epic_key}: {reason}")
        self.epic_key = epic_key


class OutputWriteFailed(SpilloverError):
    def __init__(self, path, reason: str):
        super().__init__(f"Could not write report to {path}: {reason}")
        self.path = path
