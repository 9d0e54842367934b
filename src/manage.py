"""Order lifecycle database management CLI.

Creates and drops the ordering schema on SQL-backed providers. With the
default in-memory provider there is nothing to create and the commands
report that.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database() -> int:
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    created = setup_db(ordering)
    if not created:
        print("  No SQL providers configured, nothing to create.")
    for name in created:
        print(f"  Schema ready on provider {name}.")
    print("Done.")
    return len(created)


def drop_database() -> int:
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    dropped = drop_db(ordering)
    if not dropped:
        print("  No SQL providers configured, nothing to drop.")
    for name in dropped:
        print(f"  Schema dropped on provider {name}.")
    print("Done.")
    return len(dropped)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Order lifecycle database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
