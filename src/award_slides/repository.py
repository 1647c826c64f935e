"""
Awardee persistence on top of the key-value store and photo storage.

The repository owns the key layout (``awardee:{id}`` records plus one key for
the custom category list) and the photo lifecycle: signed URLs are minted on
every read and stored objects are removed together with their awardee.
"""

from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .errors import StoreError
from .kv_store import KeyValueStore
from .models import Awardee
from .storage import PhotoStorage

logger = logging.getLogger(__name__)


def _compare_records(a: Dict[str, Any], b: Dict[str, Any]) -> int:
    # Positional order wins only when both records carry one.
    if a.get("order") is not None and b.get("order") is not None:
        return a["order"] - b["order"]
    return a["id"] - b["id"]


def normalize_categories(categories: List[str]) -> List[str]:
    """Strip names, drop blanks and duplicates, keep first-seen order."""
    seen: List[str] = []
    for category in categories:
        name = category.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


class AwardeeRepository:
    """
    CRUD over awardee records.

    Writes are last-writer-wins; there is no version check between readers
    and writers.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage: PhotoStorage,
        key_prefix: str = "awardee:",
        categories_key: str = "custom-categories",
        signed_url_expiry: int = 3600,
    ) -> None:
        self.store = store
        self.storage = storage
        self.key_prefix = key_prefix
        self.categories_key = categories_key
        self.signed_url_expiry = signed_url_expiry

    def _key(self, awardee_id: int | str) -> str:
        return f"{self.key_prefix}{awardee_id}"

    def _parse(self, record: Dict[str, Any]) -> Awardee:
        try:
            return Awardee.model_validate(record)
        except ValidationError as exc:
            raise StoreError(f"Malformed awardee record {record.get('id')!r}: {exc}") from exc

    def list_awardees(self) -> List[Awardee]:
        """
        Return every stored awardee sorted for display.

        Records are ordered by ``order`` when present, otherwise by ``id``,
        and each ``photoPath`` is resolved to a fresh signed URL.
        """
        records = self.store.get_by_prefix(self.key_prefix)
        records.sort(key=cmp_to_key(_compare_records))

        awardees = []
        for record in records:
            awardee = self._parse(record)
            if awardee.photo_path:
                url = self.storage.signed_url(awardee.photo_path, self.signed_url_expiry)
                if url:
                    awardee.photo = url
            awardees.append(awardee)
        return awardees

    def get(self, awardee_id: int | str) -> Optional[Awardee]:
        record = self.store.get(self._key(awardee_id))
        return self._parse(record) if record else None

    def save(self, awardee: Awardee) -> Awardee:
        self.store.set(self._key(awardee.id), awardee.to_record())
        return awardee

    def save_many(self, awardees: List[Awardee]) -> int:
        if not awardees:
            return 0
        self.store.mset(
            [self._key(awardee.id) for awardee in awardees],
            [awardee.to_record() for awardee in awardees],
        )
        logger.info(f"Saved {len(awardees)} awardees in one batch")
        return len(awardees)

    def delete(self, awardee_id: int | str) -> bool:
        """
        Delete an awardee and its stored photo.

        Returns:
            True if a record existed, False otherwise

        Note:
            The photo is removed before the record. A failure in between
            leaves a record pointing at a missing object.
        """
        key = self._key(awardee_id)
        record = self.store.get(key)
        if record is None:
            return False
        photo_path = record.get("photoPath")
        if photo_path:
            self.storage.remove(photo_path)
        self.store.delete(key)
        logger.info(f"Deleted awardee {awardee_id}")
        return True

    def get_categories(self) -> List[str]:
        categories = self.store.get(self.categories_key)
        return list(categories) if isinstance(categories, list) else []

    def set_categories(self, categories: List[str]) -> List[str]:
        cleaned = normalize_categories(categories)
        self.store.set(self.categories_key, cleaned)
        return cleaned
