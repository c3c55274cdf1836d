"""Seeding of the Salary category and one child per staff role."""

from dataclasses import dataclass
from typing import Iterable, Optional, Set

from models.category import CategoryType
from models.seed import StaffRole
from logger import get_logger

logger = get_logger()

SALARY_LABEL = "Salary"
DEFAULT_PLACEHOLDER = "Unnamed"


@dataclass
class SalarySeedResult:
    parent_id: str
    created: int = 0
    skipped: int = 0


def role_name(role: StaffRole, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """Pick the first name source that is set, falling back to the placeholder."""
    if role.filled_by_en is not None:
        return role.filled_by_en
    if role.filled_by_ar is not None:
        return role.filled_by_ar
    return placeholder


def role_label(title: str, name: Optional[str], placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """Build the "<title> - <name>" label of a role category.

    Blank names are replaced by the placeholder.
    """
    safe_name = (name or placeholder).strip() or placeholder
    return f"{title.strip()} - {safe_name}".strip()


class SalarySeeder:
    """Merges staff roles under the root "Salary" expense category.

    Args:
        categories: CategoryService used to find and create categories.
        placeholder: Name used for roles with no name source.
    """

    def __init__(self, categories, placeholder: str = DEFAULT_PLACEHOLDER):
        self.categories = categories
        self.placeholder = placeholder

    def desired_labels(self, roles: Iterable[StaffRole]) -> Set[str]:
        return {
            role_label(role.title, role_name(role, self.placeholder), self.placeholder)
            for role in roles
        }

    def seed(self, roles: Iterable[StaffRole]) -> SalarySeedResult:
        """Find-or-create the Salary parent, then create missing role children."""
        logger.info("Seeding Salary categories (2 levels)...")

        parent = self.categories.find_by_identity(SALARY_LABEL, CategoryType.EXPENSE)
        if parent is None:
            parent = self.categories.create(SALARY_LABEL, CategoryType.EXPENSE, None, 0)
            logger.info(f"Created Salary parent: {parent.id}")
        else:
            logger.info(f"Salary parent exists: {parent.id}")

        result = SalarySeedResult(parent_id=parent.id)
        labels = self.desired_labels(roles)
        existing = self.categories.child_labels(parent.id, CategoryType.EXPENSE)

        for label in sorted(labels):
            if label in existing:
                result.skipped += 1
                continue
            self.categories.create(label, CategoryType.EXPENSE, parent.id, 0)
            logger.info(f"  ✓ Created '{label}'")
            result.created += 1

        logger.info(f"Done. created={result.created}, skipped={result.skipped}")
        return result
