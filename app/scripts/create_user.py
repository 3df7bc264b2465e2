"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role] [--display-name NAME]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password Admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core import get_settings
from app.core.config import LOG_DATEFMT, LOG_FORMAT
from app.core.database import SessionLocal, engine, init_db
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.models.user import Role
from app.schemas.user import UserCreate
from app.services.users import UserConflictError, create_user

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt=LOG_DATEFMT,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account (e.g. the first admin).")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role]
    )
    parser.add_argument("--display-name", default=None, help="Display name (defaults to username)")
    args = parser.parse_args(argv)

    try:
        body = UserCreate(
            username=args.username.strip(),
            email=args.email.strip(),
            password=args.password,
            display_name=args.display_name,
            role=Role(args.role),
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    if get_settings().DB_AUTO_CREATE:
        init_db(engine)
    db = SessionLocal()
    try:
        user = create_user(
            db,
            username=body.username,
            email=body.email,
            password=body.password,
            display_name=body.display_name,
            role=body.role,
        )
    except UserConflictError as e:
        print(f"{e.message}: '{body.username}' / '{body.email}'.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' (id={user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
