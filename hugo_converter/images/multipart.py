"""multipart/form-data body construction.

Bodies are assembled as bytes. File content is appended verbatim, never
decoded or re-encoded, so binary images pass through unchanged.
"""

import mimetypes
import secrets
from pathlib import PurePath
from typing import Dict, Optional, Tuple

CRLF = b'\r\n'
BOUNDARY_PREFIX = '----HugoConverterBoundary'

# (filename, content type, raw content)
FilePart = Tuple[str, str, bytes]


def make_boundary() -> str:
    """Generate a random boundary unlikely to occur inside file content."""
    return BOUNDARY_PREFIX + secrets.token_hex(16)


def guess_content_type(filename: str) -> str:
    """MIME type for an image file, derived from its extension.

    Falls back to image/<ext>, or application/octet-stream when the name
    has no extension.
    """
    content_type, _ = mimetypes.guess_type(filename)
    if content_type:
        return content_type

    ext = PurePath(filename).suffix.lstrip('.').lower()
    return f"image/{ext}" if ext else "application/octet-stream"


def _quote(value: str) -> str:
    # header parameter values are double-quoted
    return value.replace('\\', '\\\\').replace('"', '%22').replace('\r', '%0D').replace('\n', '%0A')


def encode_multipart(
    fields: Dict[str, str],
    files: Dict[str, FilePart],
    boundary: Optional[str] = None,
) -> Tuple[bytes, str]:
    """Encode form fields and files as a multipart/form-data body.

    Parts are written in insertion order: all fields, then all files,
    then the closing boundary.

    Args:
        fields: Form field name to text value
        files: Form field name to (filename, content type, content)
        boundary: Boundary to use; a random one is generated if omitted

    Returns:
        Tuple of (body, Content-Type header value)
    """
    boundary = boundary or make_boundary()
    delimiter = b'--' + boundary.encode('ascii')
    parts = []

    for name, value in fields.items():
        parts.append(delimiter + CRLF)
        parts.append(f'Content-Disposition: form-data; name="{_quote(name)}"'.encode('utf-8') + CRLF)
        parts.append(CRLF)
        parts.append(value.encode('utf-8') + CRLF)

    for name, (filename, content_type, content) in files.items():
        disposition = f'Content-Disposition: form-data; name="{_quote(name)}"; filename="{_quote(filename)}"'
        parts.append(delimiter + CRLF)
        parts.append(disposition.encode('utf-8') + CRLF)
        parts.append(f'Content-Type: {content_type}'.encode('utf-8') + CRLF)
        parts.append(CRLF)
        parts.append(bytes(content))
        parts.append(CRLF)

    parts.append(delimiter + b'--' + CRLF)

    return b''.join(parts), f'multipart/form-data; boundary={boundary}'
