"""Blob storage for generated credentials, on top of Django storages."""
import logging
import posixpath
from typing import Optional
from urllib.parse import urlsplit

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


class ContentStore:
    """Keyed blob store under a bucket prefix.

    `put` with upsert replaces an existing object under the same key. The
    replacement is delete-then-save, so callers that must never lose the
    current object write under a fresh key and `delete` the old one after.
    """

    def __init__(self, storage=None, bucket: Optional[str] = None):
        self.storage = storage or default_storage
        self.bucket = bucket or getattr(settings, 'GATEPASS_QR_BUCKET', 'qr-codes')

    def _name(self, key: str) -> str:
        return f'{self.bucket}/{key}'

    def put(self, key: str, data: bytes, cache_control: Optional[str] = None, upsert: bool = False) -> str:
        name = self._name(key)
        if self.storage.exists(name):
            if not upsert:
                raise FileExistsError(f'{name} already exists')
            self.storage.delete(name)

        # Django storages take no per-object headers; cache_control is only recorded.
        content = ContentFile(data, name=key)
        saved = self.storage.save(name, content)
        logger.debug('stored %s (%d bytes, cache_control=%s)', saved, len(data), cache_control)
        return saved

    def delete(self, key: str) -> None:
        self.storage.delete(self._name(key))
        logger.debug('deleted %s', self._name(key))

    def get_public_url(self, key: str) -> str:
        return self.storage.url(self._name(key))

    def key_from_url(self, url: str) -> str:
        """Key of the object behind a reference returned by `get_public_url`."""
        return posixpath.basename(urlsplit(url).path)


def get_content_store() -> ContentStore:
    return ContentStore()
