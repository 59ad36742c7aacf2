"""Create a manager account from the command line.

Managers cannot be registered under another manager, so the first manager of
a fresh database is usually created with this script.
"""

from __future__ import annotations

import getpass
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.core.exceptions import DomainError


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), pool_size=1)

    print("\n=== Create Manager Account ===\n")
    name = input("Manager name: ").strip()
    email = input("Email: ").strip()
    password = getpass.getpass("Password (min 6 characters): ")
    department = input("Department (optional, press Enter to skip): ").strip()

    try:
        manager = container.user_service.register(
            full_name=name,
            email=email,
            password=password,
            role=Role.MANAGER.value,
            department=department or None,
        )
    except DomainError as e:
        raise SystemExit(f"ERROR: {e}")
    finally:
        container.close()

    print("\nOK: Manager account created")
    print(f"  Name:       {manager.full_name}")
    print(f"  Email:      {manager.email}")
    print(f"  Manager ID: {manager.employee_code}")
    print(f"  Department: {manager.department or 'Not assigned'}")


if __name__ == "__main__":
    main()
