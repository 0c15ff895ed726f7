"""Image upload for Hugo Converter."""

from hugo_converter.images.multipart import encode_multipart, guess_content_type
from hugo_converter.images.uploader import GyazoUploader

__all__ = [
    "encode_multipart",
    "guess_content_type",
    "GyazoUploader",
]
