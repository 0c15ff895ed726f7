"""Data models for Hugo Converter."""

import datetime
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from hugo_converter.transforms.frontmatter import render_hugo_frontmatter


class ConversionError(Exception):
    """Base error for a conversion that could not be completed."""


class ConfigurationError(ConversionError):
    """Required configuration is missing or invalid."""


class UploadError(ConversionError):
    """A single image could not be uploaded to the image host."""


class RewriteError(ConversionError):
    """The patched source note could not be persisted."""


class OutputError(ConversionError):
    """The converted document could not be written."""


@dataclass
class Note:
    """Reference to a note inside the vault.

    Only the location is held here; text is always read through a
    NoteStorage so each stage sees the latest on-disk state.
    """
    path: Path

    @property
    def basename(self) -> str:
        """File name without the .md extension."""
        return self.path.stem

    @property
    def name(self) -> str:
        return self.path.name


BRACKET = "bracket"
EMBED = "embed"


@dataclass
class ImageReference:
    """A local image reference found in note text.

    token is the exact substring matched in the source, kind is either
    BRACKET (``![alt](path)``) or EMBED (``![[name]]``).
    """
    token: str
    kind: str
    alt: str
    target: str
    resolved: Optional[Path] = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None


UploadedImageMap = Dict[str, str]


@dataclass
class ConvertedDocument:
    """A note transformed into a Hugo post. Never written back to the vault."""
    title: str
    date: datetime.datetime
    slug: str
    tags: List[str]
    body: str
    draft: bool = False

    def render(self) -> str:
        """Build the final document: frontmatter, a blank line, then the body."""
        return f"{render_hugo_frontmatter(self)}\n{self.body}"


@dataclass
class ProgressEvent:
    """A progress signal for the presentation layer."""
    stage: str
    completed: int = 0
    total: int = 0
    message: str = ""


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass
class ConversionResult:
    """Result of converting one note."""
    note: Note
    filename: str
    location: str
    first_converted: datetime.datetime
    uploaded: UploadedImageMap = field(default_factory=dict)
    unresolved: List[str] = field(default_factory=list)
    rewritten: bool = False
    warnings: List[str] = field(default_factory=list)
