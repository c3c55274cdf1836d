"""Backfill of canonical references from legacy keys.

Both passes read everything they need up front, build the key index once,
and only then write. Every update is keyed on a filter that stops matching
once it has been applied, so re-running a pass (or racing two copies of it)
converges to the same state and reports zero updates the second time.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from db.query import Update, UpdateOp, all_of, where
from models import category as category_model
from models import transaction as transaction_model
from models.transaction import Transaction
from services.key_index import build_key_index, load_key_index
from logger import get_logger

logger = get_logger()


@dataclass
class BackfillResult:
    """Counts reported by a backfill pass.

    Attributes:
        updated: Documents modified by this run.
        skipped: Records whose legacy reference could not be used.
        unchanged: Records already carrying the resolved reference.
    """

    updated: int = 0
    skipped: int = 0
    unchanged: int = 0


def _chunks(items: List, size: int):
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _apply(store, collection: str, ops: List[UpdateOp], batch_size: int) -> int:
    modified = 0
    for number, batch in enumerate(_chunks(ops, batch_size), start=1):
        result = store.bulk_update(collection, batch)
        modified += result.modified
        logger.debug(
            f"   batch {number}: {len(batch)} op(s), {result.modified} modified"
        )
    return modified


class ParentBackfill:
    """Resolves Category.parentKey into Category.parentId.

    Args:
        store: Document store instance.
        batch_size: Maximum number of update operations per bulk write.
    """

    def __init__(self, store, batch_size: int = 500):
        self.store = store
        self.batch_size = max(1, batch_size)

    def run(self) -> BackfillResult:
        logger.info("Backfilling Category.parentId from parentKey...")

        rows = self.store.find(
            category_model.COLLECTION,
            projection=["key", "parentKey", "parentId"],
        )
        index = build_key_index(rows)

        ids_by_key: Dict[str, Set[str]] = {}
        # Legacy key -> parentKey of the last row carrying one for that key
        parent_key_by_key: Dict[str, str] = {}
        for row in rows:
            key = row.get("key")
            if not isinstance(key, str) or not key:
                continue
            ids_by_key.setdefault(key, set()).add(row["id"])
            parent_key = row.get("parentKey")
            if isinstance(parent_key, str) and parent_key:
                previous = parent_key_by_key.get(key)
                if previous is not None and previous != parent_key:
                    logger.warning(
                        f"   '{key}': conflicting parent keys '{previous}' and "
                        f"'{parent_key}', last one wins"
                    )
                parent_key_by_key[key] = parent_key

        # Parent links as they will be once the queued updates are applied
        parents: Dict[str, Optional[str]] = {
            row["id"]: row.get("parentId") for row in rows
        }

        result = BackfillResult()
        ops = []
        for key, parent_key in parent_key_by_key.items():
            parent_id = index.resolve(parent_key)
            if parent_id is None:
                logger.debug(f"   '{key}': parent key '{parent_key}' not found")
                result.skipped += 1
                continue

            children = ids_by_key[key]
            if all(parents[child_id] == parent_id for child_id in children):
                result.unchanged += 1
                continue

            if self._creates_cycle(parents, children, parent_id):
                logger.warning(
                    f"   '{key}': linking to parent '{parent_key}' would create a cycle, skipping"
                )
                result.skipped += 1
                continue

            for child_id in children:
                parents[child_id] = parent_id
            ops.append(
                UpdateOp(
                    all_of(where("key").eq(key), where("parentId").ne(parent_id)),
                    Update.set(parentId=parent_id),
                    multi=True,
                )
            )

        result.updated = _apply(
            self.store, category_model.COLLECTION, ops, self.batch_size
        )
        logger.info(
            f"Updated parentId for {result.updated} categories "
            f"(skipped: {result.skipped}, unchanged: {result.unchanged})"
        )
        return result

    @staticmethod
    def _creates_cycle(
        parents: Dict[str, Optional[str]], children: Set[str], parent_id: str
    ) -> bool:
        seen = set()
        current = parent_id
        while current is not None and current not in seen:
            if current in children:
                return True
            seen.add(current)
            current = parents.get(current)
        return False


class TransactionBackfill:
    """Resolves Transaction.category into Transaction.categoryId.

    Transactions that already carry a categoryId are never read or written.

    Args:
        store: Document store instance.
        batch_size: Maximum number of update operations per bulk write.
    """

    def __init__(self, store, batch_size: int = 500):
        self.store = store
        self.batch_size = max(1, batch_size)

    def run(self) -> BackfillResult:
        logger.info("Backfilling Transaction.categoryId from Transaction.category...")

        index = load_key_index(self.store)

        unlinked = all_of(
            where("category").non_empty_string(),
            where("categoryId").is_null(),
        )
        transactions = [
            Transaction.from_document(d)
            for d in self.store.find(
                transaction_model.COLLECTION,
                unlinked,
                projection=["category", "categoryId"],
            )
        ]

        result = BackfillResult()
        ops = []
        for transaction in transactions:
            category_id = index.resolve(transaction.category)
            if category_id is None:
                result.skipped += 1
                continue
            ops.append(
                UpdateOp(
                    all_of(
                        where("id").eq(transaction.id),
                        where("categoryId").is_null(),
                    ),
                    Update.set(categoryId=category_id),
                )
            )

        result.updated = _apply(
            self.store, transaction_model.COLLECTION, ops, self.batch_size
        )
        logger.info(
            f"Updated categoryId for {result.updated} transactions "
            f"(skipped: {result.skipped})"
        )
        return result
