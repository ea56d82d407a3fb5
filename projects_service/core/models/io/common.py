"""
Shared I/O building blocks.

Write requests wrap their payload in a ``param`` object:
``{"param": {...}}``. Audit columns (``createdAt``, ``updatedBy`` ...) sent
back by clients are ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Generic, Iterable, Mapping, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ..base import CamelSchema

PayloadType = TypeVar("PayloadType")


class ParamBody(BaseModel, Generic[PayloadType]):
    """Request body of the form ``{"param": <payload>}``."""

    param: PayloadType


class AuditRead(CamelSchema):
    """Audit columns returned with every row."""

    created_at: datetime
    updated_at: datetime
    created_by: int
    updated_by: int


def camelize(row: Mapping[str, Any], exclude: Iterable[str] = ("deleted_at", "deleted_by")) -> Dict[str, Any]:
    """JSON-ready copy of a column mapping with camelCase keys."""
    skip = set(exclude)
    return jsonable_encoder({to_camel(key): value for key, value in row.items() if key not in skip})
