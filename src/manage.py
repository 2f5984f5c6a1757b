"""Storefront management CLI.

Usage:
    python src/manage.py setup-db                                  # Create all tables
    python src/manage.py drop-db                                   # Drop all tables
    python src/manage.py create-admin --email a@dtu.ac.in --name "Store Admin"
"""

import argparse
import sys


def _domain():
    from storefront.domain import storefront
    from storefront.storage import configure_storage

    configure_storage(storefront)
    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    print("Creating storefront database schema...")
    setup_db(_domain())
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    print("Dropping storefront database schema...")
    drop_db(_domain())
    print("Done.")


def create_admin(email, name):
    """Register an admin account, or promote the existing account with this email."""
    from storefront.identity.administration import ChangeUserRole
    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import Role, User

    domain = _domain()
    with domain.domain_context():
        existing = domain.repository_for(User).find_by_email(email)
        if existing is None:
            user_id = domain.process(
                RegisterUser(name=name, email=email, role=Role.ADMIN.value),
                asynchronous=False,
            )
            print(f"Admin created: {email} ({user_id})")
        elif existing.is_admin:
            print(f"{email} is already an admin.")
        else:
            domain.process(ChangeUserRole(user_id=existing.id, role=Role.ADMIN.value), asynchronous=False)
            print(f"{email} promoted to admin.")


def main():
    parser = argparse.ArgumentParser(description="Campus storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create or promote an admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--name", default="Store Admin")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.email, args.name)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
