# movment/db/base.py
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import JSON, MetaData
from sqlalchemy.orm import DeclarativeBase

from movment.db.types import UTCDateTime

# stable constraint names keep alembic batch mode (sqlite) happy
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for every Mov-Ment table.

    Timestamps are always UTC; list/dict attributes (services, team, survey
    answers, activity metadata) are stored as JSON.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
    type_annotation_map = {
        datetime: UTCDateTime,
        Dict[str, Any]: JSON,
        List[str]: JSON,
        List[Dict[str, Any]]: JSON,
    }
