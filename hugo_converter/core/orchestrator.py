"""Conversion orchestration: one note in, one Hugo post out."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import requests

from hugo_converter.core.converter import ContentConverter
from hugo_converter.core.models import (
    ConfigurationError,
    ConversionError,
    ConversionResult,
    Note,
    ProgressCallback,
    ProgressEvent,
    RewriteError,
    UploadedImageMap,
)
from hugo_converter.core.output import DownloadChannel, OutputSink, build_output_filename, create_output_sink
from hugo_converter.core.rewriter import ContentRewriter
from hugo_converter.core.scanner import ImageReferenceScanner
from hugo_converter.core.storage import NoteStorage, VaultStorage
from hugo_converter.images.uploader import GyazoUploader
from hugo_converter.transforms.frontmatter import FrontmatterDateTracker

if TYPE_CHECKING:
    from hugo_converter.config import Settings

logger = logging.getLogger(__name__)

STAGE_START = "start"
STAGE_REWRITE = "rewrite"
STAGE_CONVERT = "convert"
STAGE_WRITE = "write"
STAGE_DONE = "done"


class ConversionOrchestrator:
    """Runs the conversion pipeline for a single note.

    Order of operations:
    1. Stamp the note's first-converted date if it has none
    2. Find local image references
    3. Upload them one by one
    4. Patch the source note with the uploaded URLs
    5. Re-read the note and convert it
    6. Write the post under its dated filename

    Upload, configuration and rewrite problems are recorded as warnings
    and the conversion carries on. Failing to write the post is fatal.
    """

    def __init__(
        self,
        storage: NoteStorage,
        uploader: GyazoUploader,
        output: OutputSink,
        converter: Optional[ContentConverter] = None,
        date_tracker: Optional[FrontmatterDateTracker] = None,
        attachment_folder: str = "images",
        progress: Optional[ProgressCallback] = None,
    ):
        """Initialize ConversionOrchestrator.

        Args:
            storage: Storage for notes and attachments
            uploader: Image uploader
            output: Where converted posts are written
            converter: Content converter (default: ContentConverter())
            date_tracker: First-converted date tracker
            attachment_folder: Vault folder searched first for embeds
            progress: Optional observer for progress events
        """
        self.storage = storage
        self.uploader = uploader
        self.output = output
        self.converter = converter or ContentConverter()
        self.date_tracker = date_tracker or FrontmatterDateTracker()
        self.scanner = ImageReferenceScanner(storage, attachment_folder)
        self.rewriter = ContentRewriter(storage)
        self.progress = progress

    def convert(self, note: Note) -> ConversionResult:
        """Convert a note into a Hugo post.

        Args:
            note: The note to convert

        Returns:
            ConversionResult describing the written post

        Raises:
            ConversionError: If the note cannot be read or stamped
            OutputError: If the post cannot be written
        """
        self._emit(STAGE_START, message=note.name)
        warnings = []

        try:
            publish_date = self.date_tracker.ensure_note_date(note, self.storage)
            text = self.storage.read_text(note.path)
        except (OSError, UnicodeDecodeError) as e:
            raise ConversionError(f"Could not read {note.name}: {e}") from e

        references = self.scanner.scan(text)
        pending = [ref for ref in references if ref.is_resolved]
        unresolved = [ref.target for ref in references if not ref.is_resolved]
        for target in unresolved:
            warnings.append(f"Image file not found: {target}")

        uploaded: UploadedImageMap = {}
        if pending:
            try:
                uploaded = self.uploader.upload_all(pending, self.storage, self.progress)
            except ConfigurationError as e:
                logger.warning(f"Skipping image upload: {e}")
                warnings.append(str(e))
            else:
                failed = len(pending) - len(uploaded)
                if failed:
                    warnings.append(f"{failed} of {len(pending)} image uploads failed")

        rewritten = False
        if uploaded:
            self._emit(STAGE_REWRITE)
            try:
                rewritten = self.rewriter.rewrite(note, uploaded)
            except RewriteError as e:
                logger.error(str(e))
                warnings.append(str(e))

            try:
                text = self.storage.read_text(note.path)
            except (OSError, UnicodeDecodeError) as e:
                raise ConversionError(f"Could not read {note.name}: {e}") from e

        self._emit(STAGE_CONVERT)
        document = self.converter.convert(text, note.name, publish_date)
        filename = build_output_filename(publish_date, document.slug)

        self._emit(STAGE_WRITE, message=filename)
        location = self.output.write(document.render(), filename)

        self._emit(STAGE_DONE, message=filename)
        logger.info(f"Converted {note.name} to {filename}")

        return ConversionResult(
            note=note,
            filename=filename,
            location=location,
            first_converted=publish_date,
            uploaded=uploaded,
            unresolved=unresolved,
            rewritten=rewritten,
            warnings=warnings,
        )

    def _emit(self, stage: str, completed: int = 0, total: int = 0, message: str = "") -> None:
        if self.progress:
            self.progress(ProgressEvent(stage, completed, total, message))


def create_orchestrator(
    settings: "Settings",
    vault_path: Path,
    channel: DownloadChannel,
    progress: Optional[ProgressCallback] = None,
    session: Optional[requests.Session] = None,
) -> ConversionOrchestrator:
    """Create a ConversionOrchestrator from settings.

    Args:
        settings: Loaded settings
        vault_path: Vault root; relative output directories resolve against it
        channel: Download channel used when no output directory is set
        progress: Optional observer for progress events
        session: HTTP session for uploads

    Returns:
        Configured ConversionOrchestrator
    """
    storage = VaultStorage(vault_path)
    uploader = GyazoUploader(
        access_token=settings.access_token,
        upload_url=settings.upload_url,
        timeout=settings.timeout,
        session=session,
    )
    output = create_output_sink(settings.output_dir, storage.vault_path, channel)

    return ConversionOrchestrator(
        storage=storage,
        uploader=uploader,
        output=output,
        converter=ContentConverter(title_case=settings.title_case),
        attachment_folder=settings.attachment_folder,
        progress=progress,
    )
