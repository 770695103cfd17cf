"""
Create user accounts from the command line (accounts are not created over HTTP).

    python -m app.seed --name "Dono" --email owner@stand.pt --password ownerpass123 --role owner
    python -m app.seed --demo
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from app.config import settings
from app.database import Database
from app.models.role import RoleName
from app.schemas.user import UserCreateRequest
from app.services.user_service import user_service
from app.utils.exceptions import DuplicateEntryException

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"name": "Dono",  "email": "owner@stand.pt",   "password": "ownerpass123",   "role": RoleName.OWNER},
    {"name": "Socio", "email": "partner@stand.pt", "password": "partnerpass123", "role": RoleName.PARTNER},
]


def seed_users(database: Database, users: list[dict]) -> int:
    """Create each user; returns the number of accounts that already existed."""
    skipped = 0
    with database.session() as db:
        for raw in users:
            data = UserCreateRequest(**raw)
            # EmailStr normalizes the domain; store the address exactly as given
            email = str(raw["email"]).strip()
            try:
                user_id = user_service.create_user(db, data.name, email, data.password, data.role)
            except DuplicateEntryException:
                logger.warning(f"{email} is already registered, skipping")
                skipped += 1
                continue
            logger.info(f"Created {data.role.value} {email} (id={user_id})")
    return skipped


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create stand user accounts")
    parser.add_argument("--demo", action="store_true", help="Create the default owner and partner accounts")
    parser.add_argument("--name")
    parser.add_argument("--email")
    parser.add_argument("--password")
    parser.add_argument("--role", choices=[r.value for r in RoleName], default=RoleName.PARTNER.value)
    args = parser.parse_args(argv)

    if args.demo:
        users = DEMO_USERS
    elif args.email and args.name:
        users = [{"name": args.name, "email": args.email, "password": args.password, "role": args.role}]
    else:
        parser.error("either --demo or --name and --email are required")

    database = Database.from_settings(settings)
    try:
        database.init_schema()
        skipped = seed_users(database, users)
    except ValidationError as e:
        logger.error(f"Invalid user data: {e}")
        return 2
    finally:
        database.close()
    return 1 if skipped else 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    sys.exit(main())
