from dataclasses import dataclass
from typing import Any, Dict, Optional

COLLECTION = "Transaction"


@dataclass
class Transaction:
    """Category linkage of an application transaction.

    Only the fields the reconciler reads are modelled; the rest of the
    document belongs to the application and is never touched.
    """

    id: str
    category: Optional[str]  # legacy category key, free text
    category_id: Optional[str] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Transaction":
        category = document.get("category")
        return cls(
            id=document["id"],
            category=category if isinstance(category, str) else None,
            category_id=document.get("categoryId"),
        )
