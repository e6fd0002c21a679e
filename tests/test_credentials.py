import base64

import pytest

from sprint_spillover.core.credentials import load_credential
from sprint_spillover.core.errors import CredentialNotFound


def test_load_credential_reads_first_line_verbatim(tmp_path):
    path = tmp_path / "creds"
    path.write_text("jane@example.com:s3cr3t:with:colons\nignored second line\n", encoding="utf-8")
    cred = load_credential(path)
    assert cred.raw == "jane@example.com:s3cr3t:with:colons"
    expected = base64.b64encode(b"jane@example.com:s3cr3t:with:colons").decode()
    assert cred.authorization_header() == f"Basic {expected}"


def test_credential_repr_hides_secret(tmp_path):
    path = tmp_path / "creds"
    path.write_text("jane:topsecret", encoding="utf-8")
    assert "topsecret" not in repr(load_credential(path))


def test_missing_credential_file(tmp_path):
    with pytest.raises(CredentialNotFound) as info:
        load_credential(tmp_path / "nope")
    assert info.value.path == tmp_path / "nope"
