"""
opencafe.db.base

SQLAlchemy declarative base.

Responsibilities:
- Provide a shared DeclarativeBase for all ORM models.
- Map document-style field types (lists/dicts) onto JSON columns.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    type_annotation_map = {
        dict[str, Any]: JSON,
        dict[str, str]: JSON,
        dict[str, int]: JSON,
        list[str]: JSON,
        list[int]: JSON,
    }


# --- Module Notes -----------------------------------------------------------
# JSON columns are not mutation-tracked: always assign a new list/dict instead of
# appending in place, or the change is silently dropped on flush.
