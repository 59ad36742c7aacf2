from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.core.exceptions import StoreError
from src.attendance_tracker.attendance_tracker.core.logging import configure_logging
from src.attendance_tracker.attendance_tracker.database.bootstrap import apply_migrations, list_tables
from src.attendance_tracker.attendance_tracker.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    config = DBConfig.from_dict(dict(settings.DB_CONFIG))

    try:
        applied = apply_migrations(config)
        tables = list_tables(config)
    except StoreError as e:
        raise SystemExit(f"ERROR: {e}")

    print(f"OK: {config.describe()} migrated (new={applied or 'none'}, tables={len(tables)})")


if __name__ == "__main__":
    main()
