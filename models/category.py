"""Category model for the expense/revenue taxonomy."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

COLLECTION = "Category"


class CategoryType(str, Enum):
    EXPENSE = "EXPENSE"
    REVENUE = "REVENUE"

    @classmethod
    def values(cls):
        return tuple(member.value for member in cls)


@dataclass(frozen=True)
class LegacyLink:
    """Key-based parent reference carried by categories imported before ids existed.

    Attributes:
        key: Human-assigned legacy key of this category.
        parent_key: Legacy key of the parent, or None for a legacy root.
    """

    key: str
    parent_key: Optional[str] = None


@dataclass
class Category:
    """Represents a node of the category tree.

    A category is either legacy-linked (``legacy`` is set, the parent may only
    be known by key) or canonical (``legacy`` is None and ``parent_id`` is the
    only parent reference).

    Attributes:
        id: Canonical identifier generated by the store.
        label: Display label, unique only within (label, type, parent_id).
        type: Expense or revenue.
        parent_id: Canonical id of the parent, None for roots.
        order: Display order among siblings.
        legacy: Legacy key link, if the category predates canonical ids.
    """

    id: str
    label: str
    type: CategoryType
    parent_id: Optional[str] = None
    order: int = 0
    legacy: Optional[LegacyLink] = None

    @property
    def is_legacy(self) -> bool:
        return self.legacy is not None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Category":
        """Build a Category from a stored document.

        Documents with a missing or unknown type are read as EXPENSE, the same
        value the type normalizer writes back.
        """
        try:
            category_type = CategoryType(document.get("type"))
        except ValueError:
            category_type = CategoryType.EXPENSE

        legacy = None
        key = document.get("key")
        if isinstance(key, str) and key:
            parent_key = document.get("parentKey")
            legacy = LegacyLink(
                key=key,
                parent_key=parent_key if isinstance(parent_key, str) and parent_key else None,
            )

        return cls(
            id=document["id"],
            label=document.get("label", ""),
            type=category_type,
            parent_id=document.get("parentId"),
            order=document.get("order") or 0,
            legacy=legacy,
        )

    def to_document(self) -> Dict[str, Any]:
        """Convert to a document for insertion (without id)."""
        document = {
            "label": self.label,
            "type": self.type.value,
            "parentId": self.parent_id,
            "order": self.order,
        }
        if self.legacy is not None:
            document["key"] = self.legacy.key
            document["parentKey"] = self.legacy.parent_key
        return document
