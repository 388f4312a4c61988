"""Local filesystem storage for uploaded story images."""
from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path
from urllib.parse import unquote, urlparse

from fastapi import UploadFile

logger = logging.getLogger(__name__)

UPLOAD_ROUTE = "/uploads"
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".avif"}
_CHUNK_SIZE = 64 * 1024


class ImageRejected(ValueError):
    """The upload is missing, not an image or too large."""


class ImageNotFound(LookupError):
    """The image URL does not point at a stored upload."""


class ImageStore:
    """Store uploads under ``root`` and expose them below ``base_url``/uploads."""

    def __init__(self, root: Path, base_url: str, max_bytes: int) -> None:
        self.root = root
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def url_for(self, filename: str) -> str:
        return f"{self.base_url}{UPLOAD_ROUTE}/{filename}"

    async def save(self, upload: UploadFile) -> str:
        """Persist ``upload`` and return its public URL."""

        extension = Path(upload.filename or "").suffix.lower()
        content_type = upload.content_type or ""
        if extension not in ALLOWED_EXTENSIONS or not content_type.startswith("image/"):
            raise ImageRejected("Only image uploads are allowed")

        filename = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{extension}"
        target = self.root / filename
        written = 0
        with target.open("wb") as handle:
            while chunk := await upload.read(_CHUNK_SIZE):
                written += len(chunk)
                if written > self.max_bytes:
                    break
                handle.write(chunk)
        if written > self.max_bytes:
            target.unlink(missing_ok=True)
            raise ImageRejected("Image is too large")
        if written == 0:
            target.unlink(missing_ok=True)
            raise ImageRejected("No image uploaded")

        logger.info("Stored upload %s (%d bytes)", filename, written)
        return self.url_for(filename)

    def resolve(self, image_url: str) -> Path | None:
        """Map a public image URL back to a file inside the upload root.

        Absolute URLs must point at this server's ``base_url``; relative
        URLs are accepted as paths below it.
        """

        parsed = urlparse(image_url)
        base = urlparse(self.base_url)
        if parsed.netloc and (parsed.scheme.lower(), parsed.netloc.lower()) != (base.scheme.lower(), base.netloc.lower()):
            return None
        path = unquote(parsed.path)
        prefix = f"{base.path.rstrip('/')}{UPLOAD_ROUTE}/"
        if not path.startswith(prefix):
            return None
        filename = path[len(prefix):]
        if not filename or "/" in filename or "\\" in filename or filename in {".", ".."}:
            return None
        candidate = (self.root / filename).resolve()
        if candidate.parent != self.root.resolve():
            return None
        return candidate

    def canonical(self, image_url: str) -> str:
        """Return the single stored spelling of an upload URL; other URLs pass through."""

        path = self.resolve(image_url)
        return self.url_for(path.name) if path is not None else image_url

    def delete(self, image_url: str) -> None:
        path = self.resolve(image_url)
        if path is None or not path.is_file():
            raise ImageNotFound("Image not found")
        path.unlink()
        logger.info("Deleted upload %s", path.name)

    def discard(self, image_url: str) -> bool:
        """Delete the upload behind ``image_url`` if there is one."""

        try:
            self.delete(image_url)
        except ImageNotFound:
            return False
        return True
