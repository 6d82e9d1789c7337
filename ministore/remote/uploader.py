"""
Remote Asset Uploader

Uploads encoded images to an ImgBB-compatible hosting endpoint and returns
the public URL. The endpoint may also be a server-side proxy that adds the
API key itself, in which case no key is configured here.
"""

import logging
from typing import Optional

import requests

from ..common.errors import NetworkError, UploadError

logger = logging.getLogger(__name__)


class RemoteAssetUploader:
    """
    Uploads one image per call. No retries: each call is an independent
    upload and yields a new URL.

    Usage:
        uploader = RemoteAssetUploader(api_key="...")
        url = uploader.upload(jpeg_bytes, filename="shirt.jpg")
    """

    DEFAULT_ENDPOINT = "https://api.imgbb.com/1/upload"

    def __init__(
        self,
        api_key: str = "",
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            api_key: Hosting API key; empty when the endpoint is a proxy
            endpoint: Upload URL
            timeout: Request timeout in seconds
            session: Shared requests session (a new one is created if omitted)
        """
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()
        self.uploads_made = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def upload(self, image: bytes, filename: str = "image.jpg") -> str:
        """
        Upload an encoded image.

        Args:
            image: Encoded image bytes
            filename: Name reported to the host

        Returns:
            Public URL of the hosted image

        Raises:
            NetworkError: On transport failure or timeout
            UploadError: If the host reports a failed upload
        """
        params = {"key": self.api_key} if self.api_key else None
        files = {"image": (filename, image, "image/jpeg")}

        try:
            response = self.session.post(
                self.endpoint, params=params, files=files, timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error("Upload timeout after %ss: %s", self.timeout, filename)
            raise NetworkError(f"Upload timed out: {filename}") from e
        except requests.exceptions.RequestException as e:
            logger.error("Upload request failed: %s", e)
            raise NetworkError(f"Upload request failed: {e}") from e

        self.uploads_made += 1

        try:
            payload = response.json()
        except ValueError as e:
            raise UploadError(
                f"Invalid response from image host (HTTP {response.status_code})"
            ) from e

        if not isinstance(payload, dict) or not payload.get("success"):
            error = payload.get("error") if isinstance(payload, dict) else None
            reason = ""
            if isinstance(error, dict):
                reason = error.get("message", "")
            elif isinstance(error, str):
                reason = error
            reason = reason or f"Upload failed (HTTP {response.status_code})"
            logger.error("Upload rejected: %s", reason)
            raise UploadError(reason)

        url = (payload.get("data") or {}).get("url")
        if not url:
            raise UploadError("Image host returned no URL")

        logger.debug("Uploaded %s (%d bytes) -> %s", filename, len(image), url)
        return url
