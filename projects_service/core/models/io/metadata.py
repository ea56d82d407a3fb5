"""
Versioned metadata I/O models.

Each resource carries its payload under its own field name: forms and price
configs under ``config``, plan configs under ``phases``.
"""

from __future__ import annotations

from typing import Any, Dict, Type

from projects_service.core.models.domain import MetadataResource

from ..base import CamelSchema
from .common import AuditRead


class FormParam(CamelSchema):
    config: Dict[str, Any]


class PlanConfigParam(CamelSchema):
    phases: Dict[str, Any]


class PriceConfigParam(CamelSchema):
    config: Dict[str, Any]


class MetadataRead(AuditRead):
    """Columns shared by every metadata revision."""

    id: int
    key: str
    version: int
    revision: int


class FormRead(MetadataRead):
    config: Dict[str, Any]


class PlanConfigRead(MetadataRead):
    phases: Dict[str, Any]


class PriceConfigRead(MetadataRead):
    config: Dict[str, Any]


PARAM_SCHEMAS: Dict[MetadataResource, Type[CamelSchema]] = {
    MetadataResource.form: FormParam,
    MetadataResource.plan_config: PlanConfigParam,
    MetadataResource.price_config: PriceConfigParam,
}

READ_SCHEMAS: Dict[MetadataResource, Type[MetadataRead]] = {
    MetadataResource.form: FormRead,
    MetadataResource.plan_config: PlanConfigRead,
    MetadataResource.price_config: PriceConfigRead,
}
