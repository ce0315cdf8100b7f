# movment/db/bootstrap.py
import logging
import os

from alembic import command
from alembic.config import Config

import movment.models  # noqa: F401  (registers every table on Base.metadata)
from movment.db.base import Base
from movment.db.init_db import init_db
from movment.db.session import SessionLocal, engine, SQLALCHEMY_DATABASE_URL

logger = logging.getLogger(__name__)

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def run_migrations_and_seed() -> None:
    # absolute paths so this works from any cwd
    cfg = Config(os.path.join(BASE_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(BASE_DIR, "migrations"))
    cfg.set_main_option("sqlalchemy.url", SQLALCHEMY_DATABASE_URL)

    command.upgrade(cfg, "head")
    logger.info("Migrations applied")

    with SessionLocal() as db:
        init_db(db)


def create_tables_and_seed() -> None:
    """Schema straight from the models, for tests and throwaway databases."""

    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        init_db(db)
