"""Category service for document store operations."""

from typing import List, Optional, Set

from db.query import QueryValidationError, all_of, is_object_id, where
from models.category import COLLECTION, Category, CategoryType


class CategoryService:
    """Service for reading and creating categories."""

    def __init__(self, store):
        """Initialize the category service.

        Args:
            store: Document store instance.
        """
        self.store = store

    def find_all(self) -> List[Category]:
        """Get all categories.

        Returns:
            List of Category objects, ordered by label.
        """
        documents = self.store.find(COLLECTION)
        categories = [Category.from_document(d) for d in documents]
        return sorted(categories, key=lambda c: (c.label, c.id))

    def find(self, category_id: str) -> Optional[Category]:
        """Get a single category by id.

        Args:
            category_id: The canonical id to find.

        Returns:
            Category object if found, None otherwise.
        """
        documents = self.store.find(COLLECTION, where("id").eq(category_id))
        if documents:
            return Category.from_document(documents[0])
        return None

    def find_by_identity(
        self,
        label: str,
        type: CategoryType,
        parent_id: Optional[str] = None,
    ) -> Optional[Category]:
        """Find a category by its semantic identity (label, type, parent).

        A None parent matches roots whose parentId is null or absent.

        Returns:
            The first matching Category, or None.
        """
        documents = self.store.find(
            COLLECTION,
            all_of(
                where("label").eq(label),
                where("type").eq(CategoryType(type).value),
                where("parentId").eq(parent_id),
            ),
        )
        if documents:
            return Category.from_document(documents[0])
        return None

    def create(
        self,
        label: str,
        type: CategoryType,
        parent_id: Optional[str] = None,
        order: int = 0,
    ) -> Category:
        """Create a canonical category (no legacy fields).

        Args:
            label: Display label.
            type: Expense or revenue.
            parent_id: Canonical id of the parent, None for a root.
            order: Display order.

        Returns:
            The created Category with its generated id.

        Raises:
            QueryValidationError: If the label is empty or parent_id is not a
                canonical id.
        """
        if not label or not label.strip():
            raise QueryValidationError("Category label cannot be empty")
        if parent_id is not None and not is_object_id(parent_id):
            raise QueryValidationError(f"Invalid parent id: {parent_id!r}")

        category = Category(
            id="",
            label=label,
            type=CategoryType(type),
            parent_id=parent_id,
            order=order,
        )
        category.id = self.store.insert(COLLECTION, category.to_document())
        return category

    def child_labels(self, parent_id: str, type: CategoryType) -> Set[str]:
        """Get the stripped, non-empty labels of a parent's direct children."""
        documents = self.store.find(
            COLLECTION,
            all_of(
                where("parentId").eq(parent_id),
                where("type").eq(CategoryType(type).value),
            ),
            projection=["label"],
        )
        labels = set()
        for document in documents:
            label = document.get("label")
            if isinstance(label, str) and label.strip():
                labels.add(label.strip())
        return labels
