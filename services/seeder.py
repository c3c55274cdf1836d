"""Idempotent seeding of the category tree from a declarative plan."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from db.query import QueryValidationError
from models.category import CategoryType
from models.seed import SeedPlan
from logger import get_logger

logger = get_logger()


@dataclass
class SeedResult:
    """Counts reported by a seed run.

    Attributes:
        created: Categories created by this run.
        skipped: Categories that already existed and were reused.
        errors: Nodes that could not be seeded (e.g. unknown parent slug).
        slug_ids: Canonical id of every root and child seeded, by slug.
    """

    created: int = 0
    skipped: int = 0
    errors: int = 0
    slug_ids: Dict[str, str] = field(default_factory=dict)


class TreeSeeder:
    """Creates the categories of a seed plan that do not exist yet.

    Args:
        categories: CategoryService used to find and create categories.
    """

    def __init__(self, categories):
        self.categories = categories

    def seed(self, plan: SeedPlan) -> SeedResult:
        """Seed roots, then children.

        A node is reused when a category with the same (label, type, parent)
        exists. Roots are all resolved before the first child so that every
        child can look its parent up by slug.
        """
        result = SeedResult()
        # Children may only hang off roots
        root_ids = {}

        logger.info("Seeding root categories...")
        for root in plan.roots:
            category_id = self._find_or_create(
                result, root.slug, root.label, root.type, None, root.order
            )
            if category_id is not None:
                root_ids[root.slug] = category_id
                result.slug_ids[root.slug] = category_id

        logger.info("Seeding child categories...")
        for child in plan.children:
            parent_id = root_ids.get(child.parent_slug)
            if parent_id is None:
                logger.error(
                    f"  ✗ Root category '{child.parent_slug}' not found for "
                    f"'{child.slug}', skipping"
                )
                result.errors += 1
                continue

            category_id = self._find_or_create(
                result, child.slug, child.label, child.type, parent_id, child.order
            )
            if category_id is not None:
                result.slug_ids[child.slug] = category_id

        logger.info(
            f"Seeding complete: created={result.created}, "
            f"skipped={result.skipped}, errors={result.errors}"
        )
        return result

    def _find_or_create(
        self,
        result: SeedResult,
        slug: str,
        label: str,
        type: CategoryType,
        parent_id: Optional[str],
        order: int,
    ) -> Optional[str]:
        indent = "  " if parent_id is None else "    "
        try:
            existing = self.categories.find_by_identity(label, type, parent_id)
            if existing:
                logger.info(f"{indent}⊘ Skipped '{slug}' (already exists)")
                result.skipped += 1
                return existing.id

            created = self.categories.create(label, type, parent_id, order)
        except QueryValidationError as e:
            logger.error(f"{indent}✗ Error seeding category '{slug}': {e}")
            result.errors += 1
            return None

        logger.info(f"{indent}✓ Created '{slug}' - {label} (ID: {created.id})")
        result.created += 1
        return created.id
