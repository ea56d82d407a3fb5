"""
Project phase and phase product entity models.

Phases split a project into stages; each phase holds the products (work
items) delivered in that stage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime
from sqlmodel import Field

from ..base import AuditMixin, Base


class ProjectPhase(Base, AuditMixin, table=True):
    """Entity for project phases.

    Table: project_phases
    """

    __tablename__ = "project_phases"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    name: Optional[str] = Field(default=None, max_length=255)
    status: Optional[str] = Field(default=None, max_length=45)
    start_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    end_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    duration: Optional[int] = Field(default=None)
    budget: float = Field(default=0.0)
    spent_budget: float = Field(default=0.0)
    progress: float = Field(default=0.0)
    details: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    order: Optional[int] = Field(default=None)


class PhaseProduct(Base, AuditMixin, table=True):
    """Entity for products delivered within a phase.

    Table: phase_products
    """

    __tablename__ = "phase_products"

    id: Optional[int] = Field(default=None, primary_key=True)
    phase_id: int = Field(foreign_key="project_phases.id", index=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    direct_project_id: Optional[int] = Field(default=None)
    billing_account_id: Optional[int] = Field(default=None)
    template_id: int = Field(default=0)
    name: Optional[str] = Field(default=None, max_length=255)
    type: Optional[str] = Field(default=None, max_length=255)
    estimated_price: float = Field(default=0.0)
    actual_price: float = Field(default=0.0)
    details: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
