"""
Provision an account, e.g. the first admin. Run from project root:
  python -m storyrelay.scripts.create_user NICKNAME PASSWORD [role]
Example:
  python -m storyrelay.scripts.create_user moderator1 a-long-passphrase admin
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from storyrelay.core.database import SessionLocal
from storyrelay.models.user import UserRole
from storyrelay.services.registration import RegistrationError, register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Story Relay user with a given role.")
    parser.add_argument("nickname", help="Letters and digits, at least 3 characters")
    parser.add_argument("password", help="At least 4 characters, must not contain the nickname")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.STANDARD.value,
        choices=[r.value for r in UserRole],
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = register_user(db, args.nickname, args.password, role=UserRole(args.role))
    except RegistrationError as e:
        print(e.message, file=sys.stderr)
        return 1
    except SQLAlchemyError:
        logger.exception("Could not create user '%s'", args.nickname)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.nickname}' (id={user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
