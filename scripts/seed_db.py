from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.emp_hr.emp_hr.database.bootstrap import (
    DEMO_ADMIN_EMAIL,
    DEMO_ADMIN_PASSWORD,
    apply_seed_sql,
    ensure_demo_admin,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Load shifts, department week-offs and the demo admin.")
    parser.add_argument("--admin-email", default=DEMO_ADMIN_EMAIL)
    parser.add_argument("--admin-password", default=DEMO_ADMIN_PASSWORD)
    parser.add_argument("--skip-sql", action="store_true", help="only create or reset the admin account")
    args = parser.parse_args()

    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    if not args.skip_sql:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_admin(db_config, email=args.admin_email, password=args.admin_password)
    print(f"Seeded {db_config.get('database')}@{db_config.get('host')} (admin: {args.admin_email})")


if __name__ == "__main__":
    main()
