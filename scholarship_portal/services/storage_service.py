import os
import time
import uuid
import asyncio
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Optional

from scholarship_portal.core.config import Settings

logger = logging.getLogger(__name__)


class BlobStorage(ABC):
    """Where uploaded files live. Locators are opaque to the rest of the service."""

    @abstractmethod
    async def save(self, field_name: str, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        ...

    @abstractmethod
    async def read(self, locator: str) -> bytes:
        ...


class LocalBlobStorage(BlobStorage):

    def __init__(self, upload_dir: str):
        self.upload_dir = upload_dir
        os.makedirs(self.upload_dir, exist_ok=True)

    # Mirrors the "<field>-<epoch ms>-<random><ext>" naming used for disk uploads
    def _generate_locator(self, field_name: str, filename: str) -> str:
        ext = os.path.splitext(filename or "")[1].lower()
        unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        return os.path.join(self.upload_dir, f"{field_name}-{unique_suffix}{ext}")

    async def save(self, field_name: str, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        locator = self._generate_locator(field_name, filename)

        def _write():
            with open(locator, "wb") as fh:
                fh.write(content)

        await asyncio.to_thread(_write)
        logger.info(f"Stored {field_name} upload at {locator} ({len(content)} bytes)")
        return locator

    async def read(self, locator: str) -> bytes:
        def _read():
            with open(locator, "rb") as fh:
                return fh.read()

        return await asyncio.to_thread(_read)


class SupabaseBlobStorage(BlobStorage):

    def __init__(self, settings: Settings, client=None):
        self.bucket = settings.SUPABASE_BUCKET
        self._settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            from scholarship_portal.core.supabase_client import get_supabase_client
            self._client = get_supabase_client(self._settings)
        return self._client

    async def save(self, field_name: str, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        ext = os.path.splitext(filename or "")[1].lower()
        file_path = f"{field_name}/{uuid.uuid4().hex}{ext}"
        file_options = {"content-type": content_type or "application/octet-stream"}

        try:
            await asyncio.to_thread(
                self.client.storage.from_(self.bucket).upload, file_path, content, file_options
            )
        except Exception as e:
            logger.error(f"Supabase upload error for {field_name} ({filename}): {e}")
            raise

        logger.info(f"Uploaded {field_name} to bucket {self.bucket} at {file_path}")
        return file_path

    async def read(self, locator: str) -> bytes:
        return await asyncio.to_thread(self.client.storage.from_(self.bucket).download, locator)


def build_blob_storage(settings: Settings) -> BlobStorage:
    backend = (settings.STORAGE_BACKEND or "local").lower()
    if backend == "supabase":
        return SupabaseBlobStorage(settings)
    if backend != "local":
        raise RuntimeError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
    return LocalBlobStorage(settings.UPLOAD_DIR)
