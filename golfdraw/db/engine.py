from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from .utils import resolve_sqlite_url

# Get DB url
load_dotenv()
# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./dev.db"), ROOT_DIR
)


def make_engine(database_url: Optional[str] = None, echo: bool = False):
    url = database_url or DEFAULT_SQLITE_URL
    return create_engine(
        url,
        echo=echo,
        future=True,
    )


def get_sessionmaker(engine):
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # Keep records readable after the transaction closes
        future=True,
    )
