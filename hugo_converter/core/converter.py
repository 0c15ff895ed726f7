"""Content converter for turning vault notes into Hugo posts."""

import datetime
import re
from typing import Optional

import titlecase as tc

from hugo_converter.core.models import ConvertedDocument
from hugo_converter.transforms.frontmatter import strip_frontmatter
from hugo_converter.transforms.slug import slugify
from hugo_converter.transforms.tags import dedupe, extract_tag_line

_MARKDOWN_EXTENSION = re.compile(r'\.md$', re.IGNORECASE)


class ContentConverter:
    """Converts note text into a Hugo post.

    Handles:
    - Leading tag line extraction
    - Frontmatter replacement
    - Title detection
    - Wikilink flattening to plain text

    Image references are left alone; by the time a note gets here its
    local images have already been rewritten to uploaded URLs.
    """

    # Pattern for wikilinks: [[target]] or [[target|display]], not embeds
    WIKILINK_PATTERN = re.compile(r'(?<!!)\[\[([^\]|]+)(?:\|([^\]]+))?\]\]')

    # Pattern for a level one heading line: # Title
    TITLE_PATTERN = re.compile(r'^#[ \t]+(.+)$', re.MULTILINE)

    def __init__(self, title_case: bool = False):
        """Initialize ContentConverter.

        Args:
            title_case: Convert titles to title case with the titlecase library
        """
        self.title_case = title_case

    def convert(self, text: str, filename: str, publish_date: datetime.datetime) -> ConvertedDocument:
        """Convert note text into a Hugo post.

        Args:
            text: Full note text, frontmatter included
            filename: Note filename, used for the slug and fallback title
            publish_date: The note's first-converted date

        Returns:
            ConvertedDocument ready to render
        """
        body = strip_frontmatter(text)
        tags, body = extract_tag_line(body)
        title = self._extract_title(body, filename)
        body = self._process_wikilinks(body)

        return ConvertedDocument(
            title=title,
            date=publish_date,
            slug=slugify(filename),
            tags=dedupe(tags),
            body=body,
            draft=False,
        )

    def _extract_title(self, body: str, filename: str) -> str:
        """First level one heading, or the filename without extension.

        Args:
            body: Note body without frontmatter or tag line
            filename: Note filename

        Returns:
            Post title
        """
        match = self.TITLE_PATTERN.search(body)
        title: Optional[str] = match.group(1).strip() if match else None
        if not title:
            title = _MARKDOWN_EXTENSION.sub('', filename)

        if self.title_case:
            title = tc.titlecase(title)
        return title

    def _process_wikilinks(self, body: str) -> str:
        """Replace wikilinks with their text.

        Internal links have no counterpart on the blog, so
        [[target]] becomes target and [[target|display]] becomes display.
        """
        def replace_link(match: re.Match) -> str:
            target = match.group(1).strip()
            display = match.group(2)
            return display.strip() if display else target

        return self.WIKILINK_PATTERN.sub(replace_link, body)
