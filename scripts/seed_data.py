"""
Create the required collections and seed the admin account plus demo data.

Uses the same backend selection as the API (Firestore/Cloud Storage when a
Firebase project is configured, in-memory otherwise).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from realestate.bootstrap import ensure_collections, seed_initial_data
from realestate.config import get_settings
from realestate.dependencies import get_document_store, get_storage_client
from realestate.media import MediaService

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the real-estate database")
    parser.add_argument(
        "--admin-email",
        default=None,
        help="Admin account email (defaults to ADMIN_EMAIL setting)",
    )
    parser.add_argument(
        "--admin-password",
        default=None,
        help="Admin account password (defaults to ADMIN_PASSWORD setting)",
    )
    parser.add_argument(
        "--skip-collections",
        action="store_true",
        help="Do not probe/create the required collections",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    settings = get_settings()
    overrides = {}
    if args.admin_email:
        overrides["admin_email"] = args.admin_email
    if args.admin_password:
        overrides["admin_password"] = args.admin_password
    if overrides:
        settings = settings.model_copy(update=overrides)

    store = get_document_store()
    media = MediaService(get_storage_client(), settings.signed_url_expiry_days)
    if not args.skip_collections:
        ensure_collections(store)
    if seed_initial_data(store, media, settings):
        logger.info("Seed complete")
    else:
        logger.info("Nothing to seed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
