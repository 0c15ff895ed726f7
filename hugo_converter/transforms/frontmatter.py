"""Frontmatter handling for Hugo Converter.

Covers three things:
- parsing the leading ``---`` block of a vault note into raw lines, so
  keys can be read and injected without disturbing anything else
- the persisted ``first_converted`` stamp that fixes a post's publish date
- rendering the Hugo frontmatter of a converted document
"""

import datetime
import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

import yaml

if TYPE_CHECKING:
    from hugo_converter.core.models import ConvertedDocument, Note
    from hugo_converter.core.storage import NoteStorage

logger = logging.getLogger(__name__)

MARKER = '---'
FIRST_CONVERTED_KEY = 'first_converted'

# key: value, where the key is not indented and not a list item or comment
_KEY_LINE = re.compile(r'^([^\s#\-:][^:]*?)\s*:(?:[ \t]+(.*))?$')


def _is_marker(line: str) -> bool:
    return line.rstrip() == MARKER


@dataclass(frozen=True)
class FrontmatterBlock:
    """A leading frontmatter block kept as raw lines.

    Lines keep their original line endings so rendering an unmodified
    block reproduces the source text exactly.
    """
    opening: str
    lines: Tuple[str, ...]
    closing: str
    body: str

    @classmethod
    def parse(cls, text: str) -> Optional["FrontmatterBlock"]:
        """Parse the block at the start of text.

        Args:
            text: Full note text

        Returns:
            FrontmatterBlock, or None if text does not open with a
            marker line followed later by a closing marker line
        """
        raw_lines = text.splitlines(keepends=True)
        if not raw_lines or not _is_marker(raw_lines[0]):
            return None

        for index in range(1, len(raw_lines)):
            if _is_marker(raw_lines[index]):
                return cls(
                    opening=raw_lines[0],
                    lines=tuple(raw_lines[1:index]),
                    closing=raw_lines[index],
                    body=''.join(raw_lines[index + 1:]),
                )
        return None

    @property
    def newline(self) -> str:
        """Line ending used by the block."""
        return '\r\n' if self.opening.endswith('\r\n') else '\n'

    def data(self) -> Dict[str, Any]:
        """Load the block as YAML.

        Returns:
            Parsed mapping, empty if the block holds something else

        Raises:
            yaml.YAMLError: If the block is not valid YAML
            ValueError: If a scalar cannot be built, e.g. an impossible date
        """
        loaded = yaml.safe_load(''.join(self.lines))
        return loaded if isinstance(loaded, dict) else {}

    def get(self, key: str) -> Optional[str]:
        """Return the raw text of a top-level key's value, or None if absent."""
        for line in self.lines:
            match = _KEY_LINE.match(line.rstrip('\r\n'))
            if match and match.group(1) == key:
                return (match.group(2) or '').strip()
        return None

    def with_value(self, key: str, value: str) -> "FrontmatterBlock":
        """Return a copy with key set to value.

        An existing line for the key is replaced in place, otherwise the
        key is appended before the closing marker. Other lines are kept
        untouched.
        """
        new_line = f"{key}: {value}{self.newline}"
        lines = list(self.lines)
        for index, line in enumerate(lines):
            match = _KEY_LINE.match(line.rstrip('\r\n'))
            if match and match.group(1) == key:
                lines[index] = new_line
                break
        else:
            lines.append(new_line)

        # a closing marker at end of file may have no line ending
        closing = self.closing
        if not closing.endswith('\n'):
            closing += self.newline
        return replace(self, lines=tuple(lines), closing=closing)

    def render(self) -> str:
        return self.opening + ''.join(self.lines) + self.closing + self.body


def strip_frontmatter(text: str) -> str:
    """Return text without its leading frontmatter block."""
    block = FrontmatterBlock.parse(text)
    return block.body if block else text


def format_timestamp(value: datetime.datetime) -> str:
    """Format a timestamp as UTC ISO 8601 with milliseconds.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    value = value.astimezone(datetime.timezone.utc)
    return value.strftime('%Y-%m-%dT%H:%M:%S') + f'.{value.microsecond // 1000:03d}Z'


def parse_timestamp(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse a frontmatter timestamp value.

    Args:
        value: Raw value, possibly quoted

    Returns:
        Timezone-aware UTC datetime, or None if the value is not a timestamp
    """
    if value is None:
        return None

    value = value.strip().strip('"\'').strip()
    if not value:
        return None
    if value[-1] in 'Zz':
        value = value[:-1] + '+00:00'

    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed.astimezone(datetime.timezone.utc)


def to_timestamp(value: Any) -> Optional[datetime.datetime]:
    """Convert a loaded frontmatter value to a UTC datetime.

    YAML already resolves most timestamps to datetime or date; strings are
    parsed as ISO 8601. Any other value gives None.
    """
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day, tzinfo=datetime.timezone.utc)
    if isinstance(value, str):
        return parse_timestamp(value)
    return None


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class FrontmatterDateTracker:
    """Reads and stamps the first-converted date of a note.

    The stamp is written once, on the first conversion, and from then on
    is the publish date of the post for every later conversion.
    """

    def __init__(
        self,
        key: str = FIRST_CONVERTED_KEY,
        clock: Callable[[], datetime.datetime] = _utc_now,
    ):
        """Initialize FrontmatterDateTracker.

        Args:
            key: Frontmatter key holding the stamp
            clock: Source of the current time for new stamps
        """
        self.key = key
        self.clock = clock

    def extract_date(self, text: str) -> Optional[datetime.datetime]:
        """Read the stamp from text. Missing or malformed values give None.

        The block is read as YAML. If it is not valid YAML, the key's line
        is read on its own instead.
        """
        block = FrontmatterBlock.parse(text)
        if block is None:
            return None

        try:
            value = block.data().get(self.key)
        except (yaml.YAMLError, ValueError) as e:
            logger.debug(f"Frontmatter is not valid YAML, reading {self.key} line directly: {e}")
            value = block.get(self.key)

        parsed = to_timestamp(value)
        if value not in (None, '') and parsed is None:
            logger.warning(f"Ignoring malformed {self.key} value: {value!r}")
        return parsed

    def ensure_date(self, text: str) -> Tuple[str, datetime.datetime]:
        """Return text carrying a stamp, and the stamp itself.

        Text that already has a valid stamp is returned unchanged.

        Args:
            text: Full note text

        Returns:
            Tuple of (possibly updated text, first-converted date)
        """
        existing = self.extract_date(text)
        if existing is not None:
            return text, existing

        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=datetime.timezone.utc)
        # stored with millisecond precision, so keep the returned value equal
        # to what a later read will parse
        now = now.astimezone(datetime.timezone.utc)
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        stamp = format_timestamp(now)

        block = FrontmatterBlock.parse(text)
        if block is not None:
            updated = block.with_value(self.key, stamp).render()
        else:
            updated = f"{MARKER}\n{self.key}: {stamp}\n{MARKER}\n{text}"

        logger.info(f"Stamped {self.key}: {stamp}")
        return updated, now

    def ensure_note_date(self, note: "Note", storage: "NoteStorage") -> datetime.datetime:
        """Stamp a stored note if needed and return its first-converted date.

        The note is written back only when the stamp was added.
        """
        text = storage.read_text(note.path)
        updated, date = self.ensure_date(text)
        if updated != text:
            storage.write_text(note.path, updated)
        return date


class _QuotedString(str):
    """A string always emitted double-quoted."""


class _HugoDumper(yaml.SafeDumper):
    """YAML dumper matching the usual hand-written Hugo frontmatter."""

    def increase_indent(self, flow=False, indentless=False):
        # indent list items under their key
        return super().increase_indent(flow, False)


def _represent_quoted(dumper: yaml.SafeDumper, data: _QuotedString) -> yaml.Node:
    return dumper.represent_scalar('tag:yaml.org,2002:str', str(data), style='"')


def _represent_timestamp(dumper: yaml.SafeDumper, data: datetime.datetime) -> yaml.Node:
    return dumper.represent_scalar('tag:yaml.org,2002:timestamp', format_timestamp(data))


_HugoDumper.add_representer(_QuotedString, _represent_quoted)
_HugoDumper.add_representer(datetime.datetime, _represent_timestamp)


def render_hugo_frontmatter(document: "ConvertedDocument") -> str:
    """Render the frontmatter block of a converted document.

    Output keys, in order: title (quoted), date, slug, tags, draft.

    Args:
        document: The converted document

    Returns:
        Frontmatter including both marker lines
    """
    fields = {
        'title': _QuotedString(document.title),
        'date': document.date,
        'slug': document.slug,
        'tags': list(document.tags),
        'draft': document.draft,
    }
    dumped = yaml.dump(
        fields,
        Dumper=_HugoDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=float('inf'),
    )
    return f"{MARKER}\n{dumped}{MARKER}\n"
