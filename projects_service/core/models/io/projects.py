"""
Project I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for the project endpoints,
including the detailed project view with members, invites, attachments and
phases.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from projects_service.core.models.domain import ProjectStatus

from ..base import CamelSchema
from .common import AuditRead
from .invites import ProjectMemberInviteRead
from .members import ProjectMemberRead


class ProjectCreate(CamelSchema):
    """Schema for creating a project. New projects always start as ``draft``."""

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    type: str = Field(min_length=1, max_length=45)
    billing_account_id: Optional[int] = None
    external: Optional[Dict[str, Any]] = None
    bookmarks: Optional[List[Dict[str, Any]]] = None
    utm: Optional[Dict[str, Any]] = None
    estimated_price: Optional[Decimal] = Field(default=None, ge=0)
    terms: List[int] = Field(default_factory=list)
    details: Optional[Dict[str, Any]] = None
    challenge_eligibility: Optional[List[Dict[str, Any]]] = None
    template_id: Optional[int] = None


class ProjectUpdate(CamelSchema):
    """Schema for patching a project. Only fields present in the body change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[str] = Field(default=None, min_length=1, max_length=45)
    status: Optional[ProjectStatus] = None
    cancel_reason: Optional[str] = None
    direct_project_id: Optional[int] = None
    billing_account_id: Optional[int] = None
    external: Optional[Dict[str, Any]] = None
    bookmarks: Optional[List[Dict[str, Any]]] = None
    utm: Optional[Dict[str, Any]] = None
    estimated_price: Optional[Decimal] = Field(default=None, ge=0)
    actual_price: Optional[Decimal] = Field(default=None, ge=0)
    terms: Optional[List[int]] = None
    details: Optional[Dict[str, Any]] = None
    challenge_eligibility: Optional[List[Dict[str, Any]]] = None

    @field_validator("name", "type", "status", "terms", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # These columns are NOT NULL; omit the field to leave it unchanged.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ProjectRead(AuditRead):
    """Schema for reading a project."""

    id: int
    direct_project_id: Optional[int] = None
    billing_account_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    external: Optional[Dict[str, Any]] = None
    bookmarks: Optional[List[Dict[str, Any]]] = None
    utm: Optional[Dict[str, Any]] = None
    estimated_price: Optional[float] = None
    actual_price: Optional[float] = None
    terms: List[int] = Field(default_factory=list)
    type: str
    status: str
    details: Optional[Dict[str, Any]] = None
    challenge_eligibility: Optional[List[Dict[str, Any]]] = None
    cancel_reason: Optional[str] = None
    template_id: Optional[int] = None
    version: str
    last_activity_at: datetime
    last_activity_user_id: str


class ProjectAttachmentRead(AuditRead):
    id: int
    project_id: int
    title: Optional[str] = None
    size: Optional[int] = None
    category: Optional[str] = None
    description: Optional[str] = None
    path: str
    content_type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    allowed_users: Optional[List[int]] = None


class PhaseProductRead(AuditRead):
    id: int
    phase_id: int
    project_id: int
    direct_project_id: Optional[int] = None
    billing_account_id: Optional[int] = None
    template_id: Optional[int] = None
    name: Optional[str] = None
    type: Optional[str] = None
    estimated_price: Optional[float] = None
    actual_price: Optional[float] = None
    details: Optional[Dict[str, Any]] = None


class ProjectPhaseRead(AuditRead):
    id: int
    project_id: int
    name: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[int] = None
    budget: Optional[float] = None
    spent_budget: Optional[float] = None
    progress: Optional[float] = None
    details: Optional[Dict[str, Any]] = None
    order: Optional[int] = None
    products: List[PhaseProductRead] = Field(default_factory=list)


class ProjectDetailRead(ProjectRead):
    """A project together with the rows that belong to it."""

    members: List[ProjectMemberRead] = Field(default_factory=list)
    invites: List[ProjectMemberInviteRead] = Field(default_factory=list)
    attachments: List[ProjectAttachmentRead] = Field(default_factory=list)
    phases: List[ProjectPhaseRead] = Field(default_factory=list)
