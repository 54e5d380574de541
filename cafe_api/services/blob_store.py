import os
import re
import secrets
import time
from typing import Iterable

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from cafe_api.config import Settings
from cafe_api.exceptions import InvalidArgumentError
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

_EXTENSION_RE = re.compile(r"^\.[a-z0-9]{1,8}$")

CHUNK_SIZE = 64 * 1024


class LocalBlobStore:
    """Stores uploaded files on local disk and hands back the URL they are served under."""

    def __init__(self, directory: str, url_prefix: str, max_bytes: int):
        self.directory = directory
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes
        os.makedirs(self.directory, exist_ok=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalBlobStore":
        return cls(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX, settings.MAX_UPLOAD_BYTES)

    def _make_filename(self, prefix: str, original_name: str | None) -> str:
        ext = os.path.splitext(original_name or "")[1].lower()
        if not _EXTENSION_RE.match(ext):
            ext = ""
        return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(6)}{ext}"

    async def _read_limited(self, upload: UploadFile) -> bytes:
        # Stops reading as soon as the limit is passed
        chunks = []
        total = 0
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            total += len(chunk)
            if total > self.max_bytes:
                raise InvalidArgumentError(f"File too large (max {self.max_bytes} bytes)")
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def _write(path: str, data: bytes) -> None:
        with open(path, "wb") as fh:
            fh.write(data)

    async def save(self, upload: UploadFile, prefix: str = "upload") -> str:
        data = await self._read_limited(upload)
        if not data:
            raise InvalidArgumentError("Uploaded file is empty")

        filename = self._make_filename(prefix, upload.filename)
        await run_in_threadpool(self._write, os.path.join(self.directory, filename), data)

        logger.info(f"Stored upload {filename} ({len(data)} bytes)")
        return f"{self.url_prefix}/{filename}"

    def discard(self, urls: Iterable[str]) -> None:
        """Remove stored files that ended up unreferenced."""
        for url in urls:
            filename = os.path.basename(url)
            try:
                os.remove(os.path.join(self.directory, filename))
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove upload {filename}: {e}")
