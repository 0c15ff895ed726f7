"""Slug generation for post filenames and URLs."""

import re

import inflection

FALLBACK_SLUG = "untitled"

_MARKDOWN_EXTENSION = re.compile(r'\.md$', re.IGNORECASE)
_DISALLOWED = re.compile(r'[^a-z0-9_\s-]')
_WHITESPACE = re.compile(r'\s+')
_HYPHENS = re.compile(r'-+')


def slugify(filename: str) -> str:
    """Turn a note filename into a URL-safe slug.

    Accented Latin characters are folded to ASCII, everything outside
    letters, digits, underscore, hyphen and whitespace is dropped, and
    whitespace runs become single hyphens.

    Args:
        filename: Note filename, with or without the .md extension

    Returns:
        Lowercase slug, or FALLBACK_SLUG when nothing usable remains
    """
    slug = _MARKDOWN_EXTENSION.sub('', filename)
    slug = inflection.transliterate(slug).lower()
    slug = _DISALLOWED.sub('', slug)
    slug = _WHITESPACE.sub('-', slug)
    slug = _HYPHENS.sub('-', slug)
    slug = slug.strip('-')
    return slug or FALLBACK_SLUG
