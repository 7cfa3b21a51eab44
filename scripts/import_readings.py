"""Import meter readings from a CSV export into the configured database."""

import argparse
import logging
from pathlib import Path

from household.core.config import settings
from household.core.database import Base, SessionLocal, engine
from household.core.log import configure_logging
from household.models import meter_reading, utility_price  # noqa: F401
from household.services.importer import import_from_path

logger = logging.getLogger("import_readings")


def main() -> int:
    """Run the import and return the number of created readings."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("csv_path", type=Path, help="CSV export with one row per week")
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = import_from_path(db, args.csv_path)
    finally:
        db.close()

    logger.info("Created %d meter readings from %s", created, args.csv_path)
    return created


if __name__ == "__main__":
    main()
