"""
Create Super Admin Script
Bootstraps the first super_admin account (public registration only creates
plain users). If the account already exists it is promoted and re-enabled.

Usage:
  python -m app.scripts.create_super_admin --email admin@example.com \
      --password '...' --name "Site Admin" --phone "+15550100"
"""

import argparse
import asyncio
import sys
import os
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.permissions_config import Role
from app.database.store_client import get_store
from app.modules.users.service import UserService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BOOTSTRAP_ACTOR = "bootstrap-script"


async def ensure_super_admin(service: UserService, email: str, password: str, name: str, phone: str) -> str:
    """Create or promote the account; returns "created" or "promoted"."""
    if await service.get_user_record(email) is None:
        await service.create_user(
            name=name,
            phone=phone,
            email=email,
            password=password,
            role=Role.SUPER_ADMIN,
            created_by=BOOTSTRAP_ACTOR,
        )
        return "created"

    await service.update_role(email, Role.SUPER_ADMIN, updated_by=BOOTSTRAP_ACTOR)
    await service.set_active(email, True, updated_by=BOOTSTRAP_ACTOR)
    return "promoted"


def main():
    parser = argparse.ArgumentParser(description="Create or promote a super_admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", default=os.environ.get("SUPER_ADMIN_PASSWORD"))
    parser.add_argument("--name", default="Super Admin")
    parser.add_argument("--phone", default="")
    args = parser.parse_args()

    if not args.password:
        parser.error("--password (or SUPER_ADMIN_PASSWORD) is required")

    try:
        service = UserService(get_store())
        outcome = asyncio.run(ensure_super_admin(service, args.email, args.password, args.name, args.phone))
        logger.info(f"Super admin {args.email.strip().lower()} {outcome}")
    except Exception as e:
        logger.error(f"Error creating super admin: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
