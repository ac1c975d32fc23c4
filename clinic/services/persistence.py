"""
Durable mirror of the entity collections.

:class:`BaseStorage` is the persistence port used by the entity store.
It owns the wire format (a JSON array of records per key) and the
treatment of damaged blobs; concrete backends only move text:

* :class:`MemoryStorage` - process-local dict, used by tests.
* :class:`FileStorage` - one ``<key>.json`` file per collection.
* :class:`DatabaseStorage` - the ``StoredCollection`` table (default).
* :class:`CacheStorage` - Django's cache framework (Redis in production).

The backend is chosen with the ``CLINIC_STORAGE_BACKEND`` and
``CLINIC_STORAGE_OPTIONS`` settings, see :func:`get_storage`.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from django.conf import settings
from django.core.cache import caches
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils.module_loading import import_string

from clinic.models import StoredCollection

logger = logging.getLogger(__name__)


class BaseStorage:
    """Persistence port: whole-collection load/save keyed per entity kind."""

    def load(self, key: str) -> Optional[list[dict]]:
        """Return the stored records for ``key`` or ``None`` when absent.

        A blob that cannot be decoded into a list of records with string
        ids is reported and treated as absent so that the caller re-seeds.
        """
        try:
            blob = self.read(key)
            if blob is None:
                return None
            data = json.loads(blob)
        except (TypeError, ValueError) as exc:
            # UnicodeDecodeError is a ValueError
            logger.warning("discarding corrupted collection %s: %s", key, exc)
            return None
        if not isinstance(data, list) or not all(
            isinstance(r, dict) and isinstance(r.get('id'), str) for r in data
        ):
            logger.warning("discarding collection %s: unexpected shape", key)
            return None
        return data

    def save(self, key: str, records: Iterable[dict]) -> None:
        self.write(key, json.dumps(list(records), cls=DjangoJSONEncoder, ensure_ascii=False))

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, blob: str) -> None:
        raise NotImplementedError


class MemoryStorage(BaseStorage):
    def __init__(self, blobs: Optional[dict[str, str]] = None):
        self.blobs: dict[str, str] = dict(blobs or {})
        self.writes = 0

    def read(self, key):
        return self.blobs.get(key)

    def write(self, key, blob):
        self.blobs[key] = blob
        self.writes += 1


class FileStorage(BaseStorage):
    """Stores ``<directory>/<key>.json``.

    Writes land in a temporary file in the same directory and are moved
    into place with :func:`os.replace`, so readers see either the old or
    the new blob, never a partial one.
    """

    def __init__(self, directory):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key):
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def write(self, key, blob):
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{key}.", suffix='.tmp', dir=self.directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                fh.write(blob)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self.path_for(key))
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class DatabaseStorage(BaseStorage):
    def read(self, key):
        return StoredCollection.objects.filter(key=key).values_list('payload', flat=True).first()

    def write(self, key, blob):
        with transaction.atomic():
            StoredCollection.objects.update_or_create(key=key, defaults={'payload': blob})


class CacheStorage(BaseStorage):
    def __init__(self, alias: str = 'default', prefix: str = 'clinic:collection:'):
        self.alias = alias
        self.prefix = prefix

    def read(self, key):
        return caches[self.alias].get(self.prefix + key)

    def write(self, key, blob):
        # timeout=None: never expire
        caches[self.alias].set(self.prefix + key, blob, timeout=None)


def get_storage() -> BaseStorage:
    backend = getattr(settings, 'CLINIC_STORAGE_BACKEND', 'clinic.services.persistence.DatabaseStorage')
    options = getattr(settings, 'CLINIC_STORAGE_OPTIONS', {}) or {}
    return import_string(backend)(**options)
