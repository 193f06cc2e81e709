"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--admin]
Example:
  python -m app.scripts.create_user admin your-secure-password --admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.services.accounts import (
    AccountServiceError,
    promote_to_admin,
    register_user,
    role_names,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Warden user.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Also grant the ADMIN role",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = register_user(db, args.username, args.password)
        if args.admin:
            user = promote_to_admin(db, user.id)
        print(f"Created user '{user.username}' (id={user.id}) with roles {role_names(user)}.")
        return 0
    except AccountServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
