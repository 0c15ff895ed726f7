"""Shared fixtures for Hugo Converter tests."""

import datetime
from pathlib import Path
from typing import List
from unittest.mock import Mock

import pytest

from hugo_converter.core.storage import VaultStorage
from hugo_converter.transforms.frontmatter import FrontmatterDateTracker

UTC = datetime.timezone.utc
FIRST_DATE = datetime.datetime(2024, 3, 5, 12, 34, 56, 789000, tzinfo=UTC)
LATER_DATE = datetime.datetime(2024, 6, 1, 8, 0, 0, tzinfo=UTC)

# smallest valid PNG header plus bytes that break text decoding
PNG_BYTES = b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\x00\x80'


class RecordingStorage(VaultStorage):
    """VaultStorage that records every write."""

    def __init__(self, vault_path: Path):
        super().__init__(vault_path)
        self.writes: List[Path] = []

    def write_text(self, path: Path, text: str) -> None:
        self.writes.append(Path(path))
        super().write_text(path, text)


def make_response(status: int = 200, payload=None, reason: str = "OK", json_error: bool = False) -> Mock:
    """A stand-in for requests.Response."""
    response = Mock()
    response.status_code = status
    response.reason = reason
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


def gyazo_session(*urls: str) -> Mock:
    """Session whose post() answers each call with the next url."""
    session = Mock()
    session.post.side_effect = [make_response(payload={"url": url}) for url in urls]
    return session


def fixed_clock(value: datetime.datetime):
    return lambda: value


@pytest.fixture
def vault(tmp_path):
    """A vault with an attachment folder and a few images."""
    vault_path = tmp_path / "vault"
    (vault_path / ".obsidian").mkdir(parents=True)
    (vault_path / "images").mkdir()
    (vault_path / "assets").mkdir()

    (vault_path / "images" / "cat.png").write_bytes(PNG_BYTES)
    (vault_path / "cat.png").write_bytes(b'root cat')
    (vault_path / "dog.png").write_bytes(PNG_BYTES)
    (vault_path / "assets" / "bird.jpg").write_bytes(PNG_BYTES)
    (vault_path / "my image.png").write_bytes(PNG_BYTES)

    return vault_path.resolve()


@pytest.fixture
def storage(vault):
    return RecordingStorage(vault)


@pytest.fixture
def tracker():
    return FrontmatterDateTracker(clock=fixed_clock(FIRST_DATE))
