"""Core components for Hugo Converter."""

from hugo_converter.core.models import (
    ConfigurationError,
    ConversionError,
    ConversionResult,
    ConvertedDocument,
    ImageReference,
    Note,
    OutputError,
    ProgressEvent,
    RewriteError,
    UploadError,
)
from hugo_converter.core.storage import NoteStorage, VaultStorage
from hugo_converter.core.scanner import ImageReferenceScanner
from hugo_converter.core.rewriter import ContentRewriter
from hugo_converter.core.converter import ContentConverter
from hugo_converter.core.output import DirectorySink, DownloadSink, OutputSink, build_output_filename
from hugo_converter.core.orchestrator import ConversionOrchestrator, create_orchestrator

__all__ = [
    "ConfigurationError",
    "ConversionError",
    "ConversionResult",
    "ConvertedDocument",
    "ImageReference",
    "Note",
    "OutputError",
    "ProgressEvent",
    "RewriteError",
    "UploadError",
    "NoteStorage",
    "VaultStorage",
    "ImageReferenceScanner",
    "ContentRewriter",
    "ContentConverter",
    "DirectorySink",
    "DownloadSink",
    "OutputSink",
    "build_output_filename",
    "ConversionOrchestrator",
    "create_orchestrator",
]
