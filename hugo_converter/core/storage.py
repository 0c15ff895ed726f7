"""Note storage backed by an Obsidian vault directory."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class NoteStorage(ABC):
    """Read and write access to notes and their attachments.

    Paths handed to read/write methods come from Note objects or from
    resolve(); they are never built by the pipeline from user text.
    """

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a note's full text."""

    @abstractmethod
    def write_text(self, path: Path, text: str) -> None:
        """Replace a note's full text."""

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Read an attachment's raw content."""

    @abstractmethod
    def resolve(self, path: str) -> Optional[Path]:
        """Resolve a vault-relative path string to an existing file, or None."""


class VaultStorage(NoteStorage):
    """NoteStorage over a vault directory on the local filesystem."""

    def __init__(self, vault_path: Path):
        """Initialize VaultStorage.

        Args:
            vault_path: Path to the Obsidian vault root
        """
        self.vault_path = Path(vault_path).resolve()

    def read_text(self, path: Path) -> str:
        # newline='' keeps CRLF notes byte-identical on write back
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def write_text(self, path: Path, text: str) -> None:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        logger.debug(f"Wrote {path}")

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def resolve(self, path: str) -> Optional[Path]:
        """Resolve a path relative to the vault root.

        Paths escaping the vault are treated as not found.
        """
        if not path:
            return None

        candidate = (self.vault_path / path).resolve()
        try:
            candidate.relative_to(self.vault_path)
        except ValueError:
            logger.warning(f"Ignoring path outside the vault: {path}")
            return None

        if candidate.is_file():
            return candidate
        return None

