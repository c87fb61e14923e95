#!/usr/bin/env python3
"""
Create marketplace tables (profiles, contracts, jobs).

Uses DATABASE_URL when set, otherwise the url from config/app_config.yml.
Does NOT drop existing tables unless --drop is given.
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

# Make sure the package is importable when run from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError

from marketplace.database.store import MarketplaceDB
from marketplace.utils.config_loader import load_app_config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="Drop existing marketplace tables first")
    args = parser.parse_args(argv)

    cfg = load_app_config()
    db = MarketplaceDB(cfg.database.url)

    try:
        with db.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")

        if args.drop:
            db.drop_tables()
            print("Dropped marketplace tables")

        # Create all tables (only missing ones will be added)
        db.create_tables()
        tables = inspect(db.engine).get_table_names()
        print("✅ App tables now exist:", sorted(tables))
        return 0

    except OperationalError as e:
        print(f"❌ Failed to connect to database: {e}", file=sys.stderr)
        return 2
    finally:
        db.dispose()


if __name__ == "__main__":
    sys.exit(main())
