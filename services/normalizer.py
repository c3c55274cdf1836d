"""Repair of category documents with a missing or invalid type."""

from db.query import Update, UpdateOp, any_of, where
from models.category import COLLECTION, CategoryType
from logger import get_logger

logger = get_logger()


class TypeNormalizer:
    """Sets every category whose type is absent or unknown to a default type.

    Args:
        store: Document store instance.
        default_type: Type written to repaired documents.
    """

    def __init__(self, store, default_type: CategoryType = CategoryType.EXPENSE):
        self.store = store
        self.default_type = CategoryType(default_type)

    def run(self) -> int:
        """Repair invalid types.

        Returns:
            Number of documents repaired. Zero once the collection is clean.
        """
        logger.info("Normalizing Category.type...")

        invalid_type = any_of(
            where("type").missing(),
            where("type").not_in(CategoryType.values()),
        )
        result = self.store.bulk_update(
            COLLECTION,
            [
                UpdateOp(
                    invalid_type,
                    Update.set(type=self.default_type.value),
                    multi=True,
                )
            ],
        )

        logger.info(
            f"Repaired type for {result.modified} categories "
            f"(default: {self.default_type.value})"
        )
        return result.modified
