"""Legacy key to canonical id index."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Set

from models.category import COLLECTION
from logger import get_logger

logger = get_logger()


@dataclass
class KeyIndex:
    """In-memory mapping from legacy category key to canonical id.

    Attributes:
        ids: Legacy key -> canonical id. On duplicate keys the last row wins.
        duplicates: Keys seen on more than one category.
    """

    ids: Dict[str, str] = field(default_factory=dict)
    duplicates: Set[str] = field(default_factory=set)

    def resolve(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        return self.ids.get(key)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, key) -> bool:
        return key in self.ids


def build_key_index(rows: Iterable[Dict[str, Any]]) -> KeyIndex:
    """Build a KeyIndex from category rows.

    Rows without an id, or whose key is missing, empty or not a string, are
    ignored. Duplicate keys are not an error: the last row wins and the key is
    recorded in ``duplicates``.
    """
    index = KeyIndex()
    for row in rows:
        key = row.get("key")
        category_id = row.get("id")
        if not isinstance(key, str) or not key or not category_id:
            continue
        if key in index.ids and index.ids[key] != category_id:
            index.duplicates.add(key)
        index.ids[key] = category_id

    if index.duplicates:
        logger.warning(
            f"{len(index.duplicates)} legacy key(s) shared by several categories, "
            f"last one wins: {', '.join(sorted(index.duplicates))}"
        )
    return index


def load_key_index(store) -> KeyIndex:
    """Scan the category collection and index it by legacy key."""
    rows = store.find(COLLECTION, projection=["key"])
    return build_key_index(rows)
