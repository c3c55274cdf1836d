#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_types(args, services):
    """Repair categories with a missing or invalid type."""
    services.normalizer.run()


def cmd_parents(args, services):
    """Backfill Category.parentId from legacy parent keys."""
    services.parent_backfill.run()


def cmd_transactions(args, services):
    """Backfill Transaction.categoryId from legacy category keys."""
    services.transaction_backfill.run()


def cmd_all(args, services):
    """Run every migration phase in order."""
    logger.info("Starting Category migration...")
    logger.info("=" * 80)

    logger.info("1) Type normalization")
    repaired = services.normalizer.run()

    logger.info("2) Parent backfill")
    parents = services.parent_backfill.run()

    logger.info("3) Transaction backfill")
    transactions = services.transaction_backfill.run()

    logger.info("=" * 80)
    logger.info("Migration complete!")
    logger.info(f"Types repaired: {repaired}")
    logger.info(
        f"Parents linked: {parents.updated} (skipped: {parents.skipped}, "
        f"unchanged: {parents.unchanged})"
    )
    logger.info(
        f"Transactions linked: {transactions.updated} "
        f"(skipped: {transactions.skipped})"
    )


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Category hierarchy migration",
        description="Normalize category types and backfill canonical references",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration phases",
        dest="subcommand",
        required=True,
    )

    # migrate types
    types_parser = migrate_subparsers.add_parser(
        "types", help="Repair missing or invalid category types"
    )
    types_parser.set_defaults(func=cmd_types)

    # migrate parents
    parents_parser = migrate_subparsers.add_parser(
        "parents", help="Backfill Category.parentId from parentKey"
    )
    parents_parser.set_defaults(func=cmd_parents)

    # migrate transactions
    transactions_parser = migrate_subparsers.add_parser(
        "transactions", help="Backfill Transaction.categoryId from category"
    )
    transactions_parser.set_defaults(func=cmd_transactions)

    # migrate all
    all_parser = migrate_subparsers.add_parser(
        "all", help="Run all phases: types, parents, transactions"
    )
    all_parser.set_defaults(func=cmd_all)
