#!/usr/bin/env python3
"""
Recreate the marketplace tables and load the demo profiles, contracts and jobs.

Uses DATABASE_URL when set, otherwise the url from config/app_config.yml.
DROPS existing marketplace tables.
"""

from __future__ import annotations
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent))

from marketplace.database.seed import seed
from marketplace.database.store import MarketplaceDB
from marketplace.utils.config_loader import load_app_config


def main() -> int:
    cfg = load_app_config()
    db = MarketplaceDB(cfg.database.url)
    try:
        db.drop_tables()
        db.create_tables()
        counts = seed(db)
        print("✅ Seeded:", ", ".join(f"{k}={v}" for k, v in counts.items()))
        return 0
    except Exception as e:
        print(f"❌ Seeding failed: {e}", file=sys.stderr)
        return 1
    finally:
        db.dispose()


if __name__ == "__main__":
    sys.exit(main())
