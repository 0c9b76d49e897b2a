"""
Add a role (reference data). Run from project root:
  python -m app.scripts.create_role ROLE_NAME
Example:
  python -m app.scripts.create_role moderator
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.core.security import ROLE_NAME_MAX_LEN
from app.models import Role
from app.services.auth import find_role


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a role users can register with.")
    parser.add_argument("role_name", help=f"Role name (1-{ROLE_NAME_MAX_LEN} chars, stored upper-case)")
    args = parser.parse_args(argv)

    role_name = args.role_name.strip().upper()
    if not role_name or len(role_name) > ROLE_NAME_MAX_LEN:
        print("Invalid role name length.", file=sys.stderr)
        return 1

    engine = build_engine(get_settings())
    db = build_session_factory(engine)()
    try:
        if find_role(db, role_name) is not None:
            print(f"Role '{role_name}' already exists.", file=sys.stderr)
            return 1
        db.add(Role(role_name=role_name))
        db.commit()
        print(f"Created role '{role_name}'.")
        return 0
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
