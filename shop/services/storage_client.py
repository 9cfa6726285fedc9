# shop/services/storage_client.py
from dataclasses import dataclass

import requests
from requests import RequestException

from shop.domain.errors import IntegrationError
from shop.utils.settings import STORAGE_UPLOAD_URL, STORAGE_TIMEOUT, STORAGE_FOLDER
from shop.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PhotoUpload:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class StorageClient:
    """
    Uploads product photos to external object storage.
    The endpoint answers with JSON carrying `secure_url` (or `url`).
    No retries: a failed upload fails the request.
    """

    def __init__(self, upload_url: str | None = None, timeout: int = STORAGE_TIMEOUT, folder: str = STORAGE_FOLDER):
        self.upload_url = (upload_url if upload_url is not None else STORAGE_UPLOAD_URL).rstrip("/")
        self.timeout = timeout
        self.folder = folder

    def upload(self, photo: PhotoUpload) -> str:
        if not self.upload_url:
            raise IntegrationError("Object storage is not configured")

        logger.info(f"StorageClient POST {self.upload_url} ({photo.filename}, {photo.size} bytes)")
        try:
            resp = requests.post(
                self.upload_url,
                files={"file": (photo.filename, photo.content, photo.content_type)},
                data={"folder": self.folder},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except (RequestException, ValueError) as e:
            logger.error(f"Photo upload failed: {e}")
            raise IntegrationError("Photo upload failed") from e

        url = body.get("secure_url") or body.get("url")
        if not url:
            raise IntegrationError("Object storage returned no url")
        return url
