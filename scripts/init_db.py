from __future__ import annotations

import logging

from sqlalchemy import inspect

from golfdraw.db.engine import make_engine
from golfdraw.models import Base


def create_tables() -> None:
    """Create any missing tables on the configured database."""
    engine = make_engine()
    Base.metadata.create_all(engine)


def print_tables() -> None:
    """Inspect the configured database and print all table names."""
    engine = make_engine()
    insp = inspect(engine)
    print("Current tables:", ", ".join(sorted(insp.get_table_names())))


def main() -> None:
    """Create the schema and report the resulting tables."""
    logging.basicConfig(level=logging.INFO)
    create_tables()
    print_tables()


if __name__ == "__main__":
    main()
