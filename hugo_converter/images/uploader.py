"""Image upload to Gyazo."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import requests

from hugo_converter.core.models import (
    ConfigurationError,
    ImageReference,
    ProgressCallback,
    ProgressEvent,
    UploadError,
    UploadedImageMap,
)
from hugo_converter.core.storage import NoteStorage
from hugo_converter.images.multipart import encode_multipart, guess_content_type

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_URL = "https://upload.gyazo.com/api/upload"

STAGE_UPLOAD = "upload"
STAGE_UPLOADED = "uploaded"


class GyazoUploader:
    """Uploads local images to Gyazo and returns their public URLs.

    Uploads are strictly sequential: each image finishes (or fails)
    before the next one starts.
    """

    def __init__(
        self,
        access_token: str,
        upload_url: str = DEFAULT_UPLOAD_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GyazoUploader.

        Args:
            access_token: Gyazo API access token
            upload_url: Upload endpoint
            timeout: Request timeout in seconds, None for no timeout
            session: HTTP session to use (a new one is created if omitted)
        """
        self.access_token = access_token
        self.upload_url = upload_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def upload(self, filename: str, data: bytes) -> str:
        """Upload one image.

        Args:
            filename: Original filename, sent with the image
            data: Raw image content

        Returns:
            Public URL of the uploaded image

        Raises:
            UploadError: On transport failure, a non-success status, or a
                response without a url
        """
        body, content_type = encode_multipart(
            fields={'access_token': self.access_token},
            files={'imagedata': (filename, guess_content_type(filename), data)},
        )

        try:
            response = self.session.post(
                self.upload_url,
                data=body,
                headers={'Content-Type': content_type},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UploadError(f"Upload of {filename} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UploadError(
                f"Upload of {filename} failed: HTTP {response.status_code} {response.reason}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UploadError(f"Upload of {filename} returned invalid JSON") from e

        url = payload.get('url') if isinstance(payload, dict) else None
        if not url or not isinstance(url, str):
            raise UploadError(f"Upload of {filename} returned no url")

        return url

    def upload_all(
        self,
        references: List[ImageReference],
        storage: NoteStorage,
        progress: Optional[ProgressCallback] = None,
    ) -> UploadedImageMap:
        """Upload every resolved reference, one after another.

        A failed image is logged and left out of the result; the batch
        carries on. An image file referenced by several tokens is only
        uploaded once.

        Args:
            references: References from the scanner
            storage: Storage used to read image content
            progress: Optional observer for (completed, total) signals

        Returns:
            Mapping of token to uploaded URL

        Raises:
            ConfigurationError: If no access token is configured. Raised
                before any request is made.
        """
        if not self.access_token:
            raise ConfigurationError("Gyazo access token is not configured")

        pending = [ref for ref in references if ref.is_resolved]
        total = len(pending)
        uploaded: UploadedImageMap = {}
        by_file: Dict[Path, str] = {}

        for index, ref in enumerate(pending, start=1):
            message = ref.target
            try:
                url = by_file.get(ref.resolved)
                if url is None:
                    data = storage.read_bytes(ref.resolved)
                    url = self.upload(ref.resolved.name, data)
                    by_file[ref.resolved] = url
                    logger.info(f"Uploaded {ref.resolved.name}: {url}")
                uploaded[ref.token] = url
            except OSError as e:
                logger.error(f"Could not read image {ref.resolved}: {e}")
                message = f"{ref.target} (failed)"
            except UploadError as e:
                logger.error(str(e))
                message = f"{ref.target} (failed)"

            if progress:
                progress(ProgressEvent(STAGE_UPLOAD, index, total, message))

        if progress:
            progress(ProgressEvent(STAGE_UPLOADED, len(uploaded), total))

        return uploaded
