"""Image reference scanning for vault notes."""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote

from hugo_converter.core.models import BRACKET, EMBED, ImageReference
from hugo_converter.core.storage import NoteStorage

logger = logging.getLogger(__name__)

EXTERNAL_PREFIXES = ('http://', 'https://')


def is_external(target: str) -> bool:
    return target.startswith(EXTERNAL_PREFIXES)


def parse_image_token(token: str) -> Optional[Tuple[str, str, str]]:
    """Parse a single image token.

    Args:
        token: ``![alt](path)`` or ``![[name]]`` / ``![[name|size]]``

    Returns:
        Tuple of (kind, alt, target), or None if token is not an image
    """
    match = ImageReferenceScanner.EMBED_PATTERN.fullmatch(token)
    if match:
        return EMBED, '', match.group(1).strip()

    match = ImageReferenceScanner.BRACKET_PATTERN.fullmatch(token)
    if match:
        return BRACKET, match.group(1), match.group(2).strip()

    return None


class ImageReferenceScanner:
    """Finds local image references in note text.

    Handles:
    - Markdown images: ![alt](path/to/image.png)
    - Obsidian embeds: ![[image.png]] or ![[image.png|300]]
    """

    # Pattern for markdown images: ![alt](path)
    BRACKET_PATTERN = re.compile(r'!\[([^\]]*)\]\(([^)]+)\)')

    # Pattern for embeds: ![[name]] or ![[name|size]]
    EMBED_PATTERN = re.compile(r'!\[\[([^\]|]+)(?:\|[^\]]*)?\]\]')

    def __init__(
        self,
        storage: NoteStorage,
        attachment_folder: str = "images",
    ):
        """Initialize ImageReferenceScanner.

        Args:
            storage: Vault storage used to resolve paths to files
            attachment_folder: Vault folder searched first for embeds
        """
        self.storage = storage
        self.attachment_folder = attachment_folder.strip('/')

    def scan(self, text: str) -> List[ImageReference]:
        """Find all local image references in text.

        External URLs are skipped entirely. Each distinct token is
        returned once, in order of first appearance.

        Args:
            text: Note text

        Returns:
            List of ImageReference, unresolved ones with resolved=None
        """
        found: List[Tuple[int, ImageReference]] = []

        for match in self.BRACKET_PATTERN.finditer(text):
            target = match.group(2).strip()
            if is_external(target):
                continue
            ref = ImageReference(
                token=match.group(0),
                kind=BRACKET,
                alt=match.group(1),
                target=target,
                resolved=self._resolve_bracket(target),
            )
            found.append((match.start(), ref))

        for match in self.EMBED_PATTERN.finditer(text):
            name = match.group(1).strip()
            ref = ImageReference(
                token=match.group(0),
                kind=EMBED,
                alt='',
                target=name,
                resolved=self._resolve_embed(name),
            )
            found.append((match.start(), ref))

        found.sort(key=lambda item: item[0])

        references: Dict[str, ImageReference] = {}
        for _, ref in found:
            if ref.token in references:
                continue
            references[ref.token] = ref
            if not ref.is_resolved:
                logger.warning(f"Image file not found: {ref.target}")

        return list(references.values())

    def _candidates_for_bracket(self, target: str) -> List[str]:
        # vault-root relative, as written and URL-decoded
        return [target.lstrip('/'), unquote(target).lstrip('/')]

    def _candidates_for_embed(self, name: str) -> List[str]:
        candidates = []
        if self.attachment_folder:
            candidates.append(f"{self.attachment_folder}/{name}")
        candidates.append(name.lstrip('/'))
        candidates.append(name)
        return candidates

    def _resolve_bracket(self, target: str) -> Optional[Path]:
        return self._first_existing(self._candidates_for_bracket(target))

    def _resolve_embed(self, name: str) -> Optional[Path]:
        return self._first_existing(self._candidates_for_embed(name))

    def _first_existing(self, candidates: List[str]) -> Optional[Path]:
        seen = set()
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            resolved = self.storage.resolve(candidate)
            if resolved is not None:
                return resolved
        return None
