#!/usr/bin/env python3

import sys
from pathlib import Path
from models.seed import SeedFileError, load_roster, load_seed_plan
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all categories as a tree."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories found.")
        return

    ids = {category.id for category in categories}
    children = {}
    for category in categories:
        children.setdefault(category.parent_id, []).append(category)

    def show(category, depth, seen):
        legacy = f" [key: {category.legacy.key}]" if category.is_legacy else ""
        logger.info(
            f"{'  ' * depth}{category.label} ({category.type.value}, "
            f"ID: {category.id}){legacy}"
        )
        seen.add(category.id)
        for child in sorted(children.get(category.id, []), key=lambda c: (c.order, c.label)):
            if child.id not in seen:
                show(child, depth + 1, seen)

    logger.info("\nCategories:")
    logger.info("=" * 80)
    seen = set()
    # Nodes whose parent is missing are shown as roots
    roots = [c for c in categories if c.parent_id is None or c.parent_id not in ids]
    for root in sorted(roots, key=lambda c: (c.order, c.label)):
        show(root, 0, seen)
    logger.info("-" * 80)
    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_seed(args, services):
    """Seed the category tree from a YAML seed plan."""
    seed_file = Path(args.file) if args.file else services.config.seed_dir / "categories.yaml"

    try:
        plan = load_seed_plan(seed_file)
    except SeedFileError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"\nSeeding categories from {seed_file}")
    logger.info("=" * 80)

    result = services.tree_seeder.seed(plan)

    logger.info("=" * 80)
    logger.info("\nSeeding complete!")
    logger.info(f"Created: {result.created}")
    logger.info(f"Skipped: {result.skipped}")
    logger.info(f"Errors: {result.errors}")


def cmd_seed_salary(args, services):
    """Seed the Salary category with one child per staff role."""
    roster_file = (
        Path(args.file) if args.file else services.config.seed_dir / "salary_roles.yaml"
    )

    try:
        roster = load_roster(roster_file)
    except SeedFileError as e:
        logger.error(str(e))
        sys.exit(1)

    result = services.salary_seeder.seed(roster.roles())

    logger.info(f"Salary parent: {result.parent_id}")
    logger.info(f"Created: {result.created}")
    logger.info(f"Skipped: {result.skipped}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="List categories and seed the category tree",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    # categories list
    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    # categories seed
    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed categories from a YAML seed plan"
    )
    seed_parser.add_argument(
        "--file",
        help="Seed plan to use (default: db/seed/categories.yaml)",
    )
    seed_parser.set_defaults(func=cmd_seed)

    # categories seed-salary
    salary_parser = categories_subparsers.add_parser(
        "seed-salary", help="Seed the Salary category from a staff role roster"
    )
    salary_parser.add_argument(
        "--file",
        help="Role roster to use (default: db/seed/salary_roles.yaml)",
    )
    salary_parser.set_defaults(func=cmd_seed_salary)
