"""
Base ORM Model.

============================================================
PURPOSE
============================================================
Declarative base shared by the waste intelligence ORM
models. All datetime columns are timezone-aware.

============================================================
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base for all ORM models.

    Provides a common metadata for table creation.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }
