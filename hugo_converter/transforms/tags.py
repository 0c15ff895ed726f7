"""Leading tag line parsing.

A note may open with a line of inline tags such as ``#python #hugo``.
Those become the post's tags and the line is removed from the body.
"""

import re
from typing import List, Tuple

TAG_TOKEN = re.compile(r'^#(\w[\w/-]*)$')


def parse_tag_line(line: str) -> List[str]:
    """Parse a single line as a tag line.

    Args:
        line: One line of text, without its line ending

    Returns:
        Tag names without the leading '#', or an empty list if the line
        is not made up solely of tag tokens
    """
    tokens = line.split()
    if not tokens:
        return []

    tags = []
    for token in tokens:
        match = TAG_TOKEN.match(token)
        if match is None:
            return []
        tags.append(match.group(1))
    return tags


def extract_tag_line(body: str) -> Tuple[List[str], str]:
    """Extract a leading tag line from a note body.

    Leading blank lines are skipped when looking for the tag line. When
    one is found it is removed together with the blank lines after it.

    Args:
        body: Note body, frontmatter already removed

    Returns:
        Tuple of (tags, body without the tag line)
    """
    lines = body.splitlines(keepends=True)

    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    if index == len(lines):
        return [], body

    tags = parse_tag_line(lines[index])
    if not tags:
        return [], body

    rest = index + 1
    while rest < len(lines) and not lines[rest].strip():
        rest += 1
    return tags, ''.join(lines[rest:])


def dedupe(tags: List[str]) -> List[str]:
    """Drop repeated tags, keeping first-seen order."""
    seen = set()
    result = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result
