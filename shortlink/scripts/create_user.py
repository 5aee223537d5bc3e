"""
Create a user (e.g. first admin). Run from project root:
  python -m shortlink.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m shortlink.scripts.create_user "Site Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from sqlalchemy import func

from shortlink.core.database import SessionLocal
from shortlink.core.security import EMAIL_MAX_LEN, NAME_MAX_LEN, PASSWORD_MAX_LEN, hash_password
from shortlink.models.user import User


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Shortlink user (bootstrap the first admin).")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Login email (unique)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    name = args.name.strip()
    email = args.email.strip()
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if "@" not in email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = db.query(User).filter(func.lower(User.email) == email.lower()).first()
        if existing:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(args.password),
            role=args.role,
        )
        db.add(user)
        db.commit()
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
