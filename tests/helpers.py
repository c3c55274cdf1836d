"""Helper utilities for tests."""

from typing import Optional

from db.query import where
from models import category as category_model
from models import transaction as transaction_model


def insert_legacy_category(
    store,
    key: Optional[str],
    parent_key: Optional[str] = None,
    label: Optional[str] = None,
    type: Optional[str] = "EXPENSE",
    **extra,
) -> str:
    """Insert a category the way the legacy import wrote them.

    Pass type=None to leave the type field out entirely.
    """
    document = {"label": label or key or "Unlabelled", "order": 0}
    if key is not None:
        document["key"] = key
    document["parentKey"] = parent_key
    if type is not None:
        document["type"] = type
    document.update(extra)
    return store.insert(category_model.COLLECTION, document)


def insert_transaction(store, category=None, **fields) -> str:
    """Insert an application transaction document."""
    document = {"amount": 10.0, "description": "test", **fields}
    if category is not None:
        document["category"] = category
    return store.insert(transaction_model.COLLECTION, document)


def get_document(store, collection: str, document_id: str) -> dict:
    """Fetch a single document by id."""
    documents = store.find(collection, where("id").eq(document_id))
    assert len(documents) == 1
    return documents[0]
