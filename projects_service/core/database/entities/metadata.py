"""
Versioned metadata entity models.

Forms, plan configs and price configs are stored as append-only revisions:
``(key, version, revision)`` identifies one immutable row. A new version
starts at revision 1; edits to a version append revision ``latest + 1``.
Each model names the JSON column holding its payload in ``payload_field``.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field

from ..base import AuditMixin, Base


class VersionedMetadataMixin(AuditMixin):
    """Columns shared by every versioned metadata table."""

    key: str = Field(max_length=45)
    version: int = Field(ge=1)
    revision: int = Field(ge=1)

    payload_field: ClassVar[str]
    resource_name: ClassVar[str]

    def get_payload(self) -> Dict[str, Any]:
        return getattr(self, self.payload_field)


class Form(Base, VersionedMetadataMixin, table=True):
    """Project creation form definition.

    Table: form
    """

    __tablename__ = "form"
    __table_args__ = (Index("ix_form_key_version_revision", "key", "version", "revision"),)

    payload_field: ClassVar[str] = "config"
    resource_name: ClassVar[str] = "Form"

    id: Optional[int] = Field(default=None, primary_key=True)
    config: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))


class PlanConfig(Base, VersionedMetadataMixin, table=True):
    """Phase plan used when a project is created from a template.

    Table: plan_config
    """

    __tablename__ = "plan_config"
    __table_args__ = (Index("ix_plan_config_key_version_revision", "key", "version", "revision"),)

    payload_field: ClassVar[str] = "phases"
    resource_name: ClassVar[str] = "PlanConfig"

    id: Optional[int] = Field(default=None, primary_key=True)
    phases: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))


class PriceConfig(Base, VersionedMetadataMixin, table=True):
    """Pricing rules applied to project estimates.

    Table: price_config
    """

    __tablename__ = "price_config"
    __table_args__ = (Index("ix_price_config_key_version_revision", "key", "version", "revision"),)

    payload_field: ClassVar[str] = "config"
    resource_name: ClassVar[str] = "PriceConfig"

    id: Optional[int] = Field(default=None, primary_key=True)
    config: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
