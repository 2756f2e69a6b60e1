"""Tests for storage key generation."""

import re

import pytest

from app.exceptions import KeyGenerationError, UpstreamError
from app.services import storage_keys
from app.services.storage_keys import file_extension, generate_storage_key

KEY_RE = re.compile(r"^[A-Za-z0-9_-]{43}\.(?P<ext>[a-z0-9]+)$")


def test_file_extension():
    assert file_extension("image/png") == "png"
    assert file_extension("image/jpeg") == "jpeg"
    assert file_extension("video/mp4") == "mp4"


@pytest.mark.parametrize("media_type,ext", [("image/png", "png"), ("video/mp4", "mp4")])
def test_key_format(media_type, ext):
    key = generate_storage_key(media_type)
    match = KEY_RE.match(key)
    assert match is not None
    assert match.group("ext") == ext


def test_keys_are_unique():
    keys = {generate_storage_key("image/png") for _ in range(200)}
    assert len(keys) == 200


def test_entropy_failure_is_server_error(monkeypatch):
    def broken(_n):
        raise OSError("no entropy")

    monkeypatch.setattr(storage_keys.secrets, "token_bytes", broken)

    with pytest.raises(KeyGenerationError) as exc_info:
        generate_storage_key("image/png")
    assert isinstance(exc_info.value, UpstreamError)
    assert exc_info.value.status_code == 500
