"""Output targets for converted posts."""

import datetime
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

from hugo_converter.core.models import OutputError

logger = logging.getLogger(__name__)

# receives (filename, content)
DownloadChannel = Callable[[str, str], None]


def build_output_filename(publish_date: datetime.datetime, slug: str) -> str:
    """Filename of a post: YYYYMMDD of the publish date, "01", then the slug.

    The "01" sequence number is fixed; posts with the same date and slug
    share a filename.
    """
    if publish_date.tzinfo is not None:
        publish_date = publish_date.astimezone(datetime.timezone.utc)
    return f"{publish_date.strftime('%Y%m%d')}01-{slug}.md"


def _write_atomic(target: Path, content: str) -> None:
    """Write content to a temp file beside target, then move it into place.

    An existing target is left untouched if the write fails.
    """
    fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
        os.replace(tmp_path, target)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


class OutputSink(ABC):
    """Destination for converted documents."""

    @abstractmethod
    def write(self, content: str, filename: str) -> str:
        """Write content under filename.

        Returns:
            Description of where the content went
        """


class DirectorySink(OutputSink):
    """Writes posts into a directory, replacing files of the same name."""

    def __init__(self, directory: str, base_dir: Optional[Path] = None):
        """Initialize DirectorySink.

        Args:
            directory: Output directory, absolute or relative to base_dir
            base_dir: Base for relative directories (default: current directory)
        """
        self.directory = directory
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    @property
    def path(self) -> Path:
        path = Path(self.directory).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path.resolve()

    def write(self, content: str, filename: str) -> str:
        target_dir = self.path
        target = target_dir / filename
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            _write_atomic(target, content)
        except OSError as e:
            raise OutputError(f"Could not write {target}: {e}") from e

        logger.info(f"Wrote {target}")
        return str(target)


class DownloadSink(OutputSink):
    """Hands posts to a download channel without touching the filesystem."""

    def __init__(self, channel: DownloadChannel):
        self.channel = channel

    def write(self, content: str, filename: str) -> str:
        self.channel(filename, content)
        return f"download:{filename}"


def create_output_sink(
    output_dir: Optional[str],
    base_dir: Optional[Path],
    channel: DownloadChannel,
) -> OutputSink:
    """Pick the output sink for the configured directory.

    A configured directory is always used, even if writing to it later
    fails. Only an empty setting selects the download channel.

    Args:
        output_dir: Configured output directory, empty for download
        base_dir: Base for a relative output directory
        channel: Download channel

    Returns:
        The OutputSink to use
    """
    if output_dir and output_dir.strip():
        return DirectorySink(output_dir.strip(), base_dir)
    return DownloadSink(channel)
