"""
Blob storage for leave attachments and avatars
Files land under UPLOAD_DIR and are served from /uploads
"""
import base64
import binascii
import logging
import mimetypes
import os
from typing import Optional

from leave_portal.config import settings

logger = logging.getLogger(__name__)


class StorageService:
    """Stores base64 payloads on local disk and returns their public URL"""

    def __init__(self, root: Optional[str] = None, base_url: str = "/uploads"):
        self.root = root or settings.UPLOAD_DIR
        self.base_url = base_url.rstrip("/")

    def _split_data_url(self, data: str):
        """Return (payload, extension) for raw base64 or a data: URL"""
        if data.startswith("data:") and "," in data:
            header, payload = data.split(",", 1)
            mime = header[5:].split(";", 1)[0]
            return payload, mimetypes.guess_extension(mime) or ""
        return data, ""

    def upload(self, data: str, path: str) -> str:
        payload, extension = self._split_data_url(data)
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("Attachment is not valid base64 data")

        parts = [p for p in path.replace("\\", "/").split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            raise ValueError(f"Invalid upload path: {path}")

        relative = "/".join(parts)
        if extension and not os.path.splitext(relative)[1]:
            relative += extension

        target = os.path.join(self.root, *relative.split("/"))
        os.makedirs(os.path.dirname(target), exist_ok=True)
        with open(target, "wb") as f:
            f.write(content)

        logger.info("Stored upload %s (%d bytes)", relative, len(content))
        return f"{self.base_url}/{relative}"

    def remove(self, url: str) -> bool:
        """Delete a file previously returned by upload(); False if there was none"""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return False
        parts = [p for p in url[len(prefix):].split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            return False

        target = os.path.join(self.root, *parts)
        if not os.path.isfile(target):
            return False
        os.remove(target)
        logger.info("Removed upload %s", "/".join(parts))
        return True


# Global instance
storage_service = StorageService()
