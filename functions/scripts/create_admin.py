"""
Create or reset an admin account for the back office.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tourbook.auth import hash_password
from tourbook.dependencies import get_db_client

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--email", default=None, help="Contact email")
    parser.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    password = args.password or getpass.getpass("Password: ")
    if not password:
        logger.error("Password must not be empty")
        return 1

    db = get_db_client()
    db.create_admin(args.username, args.email, hash_password(password))
    logger.info("Admin %s saved", args.username)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
