"""EasyKeep Inventory management CLI.

Provides commands to create and drop the database schema and to bootstrap
the first admin account.

Usage:
    python src/manage.py setup-db                                  # Create all tables
    python src/manage.py drop-db                                   # Drop all tables
    python src/manage.py create-admin --username root --email root@example.com
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the inventory domain."""
    from inventory.domain import inventory
    from inventory.utils.db import setup_db

    print("Initializing inventory domain...")
    inventory.init()
    print("Creating inventory database schema...")
    setup_db(inventory)
    print("Done.")


def drop_database():
    """Drop the database schema for the inventory domain."""
    from inventory.domain import inventory
    from inventory.utils.db import drop_db

    print("Initializing inventory domain...")
    inventory.init()
    print("Dropping inventory database schema...")
    drop_db(inventory)
    print("Done.")


def create_admin(username, email):
    """Register an admin account and print its id for use in X-User-Id."""
    from protean.exceptions import ValidationError

    from inventory.domain import inventory
    from inventory.users.registration import RegisterUser

    inventory.init()
    with inventory.domain_context():
        try:
            user_id = inventory.process(
                RegisterUser(username=username, email=email, role="admin"),
                asynchronous=False,
            )
        except ValidationError as exc:
            print(f"Could not create admin: {exc.messages}")
            sys.exit(1)
    print(f"Admin created: {user_id}")


def main():
    parser = argparse.ArgumentParser(description="EasyKeep Inventory management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Register an admin account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--email", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.username, args.email)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
