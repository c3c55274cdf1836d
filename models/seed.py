"""Declarative seed definitions loaded from YAML files.

A seed plan lists root categories and child categories (children point at a
root by slug). A role roster lists staff roles grouped by team; each role
becomes a child of the Salary category.
"""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from models.category import CategoryType


class SeedFileError(Exception):
    """Raised when a seed file cannot be read or fails validation."""


class SeedRoot(BaseModel):
    """A desired root category."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    slug: str = Field(min_length=1)
    label: str = Field(min_length=1)
    type: CategoryType = CategoryType.EXPENSE
    order: int = 0


class SeedChild(SeedRoot):
    """A desired child category, attached to a root by slug."""

    parent_slug: str = Field(min_length=1, alias="parentSlug")


class SeedPlan(BaseModel):
    """Roots and children to create-or-reuse, in declaration order."""

    roots: List[SeedRoot] = Field(default_factory=list)
    children: List[SeedChild] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_slugs(self) -> "SeedPlan":
        seen = set()
        for node in [*self.roots, *self.children]:
            if node.slug in seen:
                raise ValueError(f"Duplicate slug '{node.slug}'")
            seen.add(node.slug)
        return self


class StaffRole(BaseModel):
    """A staff role; the first name source that is set wins."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    filled_by_en: Optional[str] = Field(default=None, alias="filledByEn")
    filled_by_ar: Optional[str] = Field(default=None, alias="filledByAr")


class RoleRoster(BaseModel):
    """Staff roles grouped by team, in declaration order."""

    groups: Dict[str, List[StaffRole]] = Field(default_factory=dict)

    def roles(self) -> List[StaffRole]:
        return [role for group in self.groups.values() for role in group]


def _load_yaml(path: Path):
    if not path.exists():
        raise SeedFileError(f"Seed file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SeedFileError(f"Error parsing YAML file {path}: {e}") from e


def load_seed_plan(path: Path) -> SeedPlan:
    """Load and validate a category seed plan.

    Raises:
        SeedFileError: If the file is missing, not valid YAML or invalid.
    """
    data = _load_yaml(path)
    try:
        return SeedPlan.model_validate(data)
    except ValidationError as e:
        raise SeedFileError(f"Invalid seed plan {path}: {e}") from e


def load_roster(path: Path) -> RoleRoster:
    """Load and validate a staff role roster.

    Raises:
        SeedFileError: If the file is missing, not valid YAML or invalid.
    """
    data = _load_yaml(path)
    try:
        return RoleRoster.model_validate(data)
    except ValidationError as e:
        raise SeedFileError(f"Invalid role roster {path}: {e}") from e
