#!/usr/bin/env python3
"""
Category reconciler CLI - batch jobs for the category hierarchy migration.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    migrate      Normalize types and backfill canonical references
    categories   List and seed categories

Examples:
    python -m cli migrate types
    python -m cli migrate parents
    python -m cli migrate transactions
    python -m cli migrate all
    python -m cli categories list
    python -m cli categories seed
    python -m cli categories seed-salary --file roles.yaml
"""

import sys
import argparse
from cli import migrate, categories
from config import load_config
from services.base import Services
from logger import setup_logging, get_logger


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Category hierarchy reconciliation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    migrate.setup_parser(subparsers)
    categories.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # One store handle for the whole run, injected into every engine
            services = Services(config)
            args.func(args, services)
        except Exception as e:
            get_logger().error(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
