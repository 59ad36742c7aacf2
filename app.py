"""Run the API server: ``python app.py`` (settings picked by ``APP_ENV``)."""

from __future__ import annotations

from src.attendance_tracker.attendance_tracker.core.exceptions import StoreError
from src.attendance_tracker.attendance_tracker.core.logging import get_logger
from src.attendance_tracker.attendance_tracker.main import create_app

logger = get_logger("attendance_tracker")


def main() -> None:
    try:
        app = create_app()
    except StoreError as e:
        # The service cannot serve traffic without its schema and signing key.
        logger.critical("Startup failed: %s", e)
        raise SystemExit(1)

    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])


if __name__ == "__main__":
    main()
