"""Load the pre-provisioned Jira credential from a local one-line file."""

from __future__ import annotations

from pathlib import Path

from .errors import CredentialNotFound
from .models import Credential


def load_credential(path: str | Path) -> Credential:
    """Read the first line of ``path`` verbatim as ``principal:secret``.

    The content is not validated; a malformed credential is rejected by the
    server on the first request.
    """
    cred_path = Path(path)
    if not cred_path.is_file():
        raise CredentialNotFound(cred_path)
    with cred_path.open(encoding="utf-8") as fh:
        line = fh.readline()
    return Credential(raw=line.rstrip("\r\n"))
