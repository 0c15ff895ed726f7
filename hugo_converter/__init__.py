"""
Hugo Converter - Turn Obsidian notes into Hugo blog posts

Converts a single vault note into a Hugo post with support for:
- Uploading local images to Gyazo and rewriting the note to use them
- A stable publish date stamped into the note on first conversion
- Tag line and title extraction
- Generated Hugo frontmatter and dated filenames
"""

from hugo_converter.core.models import (
    ConfigurationError,
    ConversionError,
    ConversionResult,
    ConvertedDocument,
    Note,
    OutputError,
    RewriteError,
    UploadError,
)
from hugo_converter.core.orchestrator import ConversionOrchestrator, create_orchestrator
from hugo_converter.config import Settings, load_settings
from hugo_converter.images.uploader import GyazoUploader
from hugo_converter.transforms.slug import slugify

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConversionError",
    "ConversionResult",
    "ConvertedDocument",
    "Note",
    "OutputError",
    "RewriteError",
    "UploadError",
    "ConversionOrchestrator",
    "create_orchestrator",
    "Settings",
    "load_settings",
    "GyazoUploader",
    "slugify",
]
