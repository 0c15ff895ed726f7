"""Rewrites image references in the source note to uploaded URLs."""

import logging

from hugo_converter.core.models import EMBED, Note, RewriteError, UploadedImageMap
from hugo_converter.core.scanner import parse_image_token
from hugo_converter.core.storage import NoteStorage

logger = logging.getLogger(__name__)

EMBED_ALT_TEXT = "image"


def replacement_for(token: str, url: str) -> str:
    """Markdown image pointing at url, keeping the alt text of token.

    Embeds have no alt text and get EMBED_ALT_TEXT.
    """
    parsed = parse_image_token(token)
    if parsed is None:
        raise ValueError(f"Not an image token: {token!r}")

    kind, alt, _ = parsed
    if kind == EMBED:
        alt = EMBED_ALT_TEXT
    return f"![{alt}]({url})"


def apply_uploads(text: str, uploaded: UploadedImageMap) -> str:
    """Replace every occurrence of each uploaded token in text.

    Tokens are replaced as exact substrings; no pattern is built from
    the user's paths.
    """
    for token, url in uploaded.items():
        text = text.replace(token, replacement_for(token, url))
    return text


class ContentRewriter:
    """Patches the source note so uploaded images point at their URLs.

    The change is permanent, so a later conversion finds remote URLs and
    does not upload the same images again.
    """

    def __init__(self, storage: NoteStorage):
        self.storage = storage

    def rewrite(self, note: Note, uploaded: UploadedImageMap) -> bool:
        """Apply uploaded URLs to the note as currently stored.

        Args:
            note: Note to patch
            uploaded: Mapping of token to uploaded URL

        Returns:
            True if the note changed and was written

        Raises:
            RewriteError: If the note cannot be read or written
        """
        if not uploaded:
            return False

        try:
            original = self.storage.read_text(note.path)
            updated = apply_uploads(original, uploaded)
            if updated == original:
                logger.debug(f"No image references to update in {note.name}")
                return False
            self.storage.write_text(note.path, updated)
        except (OSError, UnicodeDecodeError) as e:
            raise RewriteError(f"Could not update {note.name}: {e}") from e

        logger.info(f"Updated image URLs in {note.name}")
        return True
