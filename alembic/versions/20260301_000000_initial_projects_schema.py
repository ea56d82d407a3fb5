"""Initial schema for the projects service

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates the project tables (projects, members, invites, attachments, phases,
phase products) and the versioned metadata tables (form, plan_config,
price_config). Every table carries the audit and soft-delete columns.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import List, Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> List[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("updated_by", sa.Integer(), nullable=False),
        sa.Column("deleted_by", sa.Integer(), nullable=True),
    ]


def _create_metadata_table(name: str, payload_column: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("key", sa.String(45), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False),
        sa.Column(payload_column, JSONB(), nullable=False, server_default="{}"),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("version > 0", name=f"ck_{name}_version_positive"),
        sa.CheckConstraint("revision > 0", name=f"ck_{name}_revision_positive"),
    )
    op.create_index(f"ix_{name}_key_version_revision", name, ["key", "version", "revision"])


def upgrade() -> None:
    """Create all tables."""

    # Create projects table
    op.create_table(
        "projects",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("direct_project_id", sa.BigInteger(), nullable=True),
        sa.Column("billing_account_id", sa.BigInteger(), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("external", JSONB(), nullable=True),
        sa.Column("bookmarks", JSONB(), nullable=True),
        sa.Column("utm", JSONB(), nullable=True),
        sa.Column("estimated_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("actual_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("terms", JSONB(), nullable=False, server_default="[]"),
        sa.Column("type", sa.String(45), nullable=False),
        sa.Column("status", sa.String(45), nullable=False),
        sa.Column("details", JSONB(), nullable=True),
        sa.Column("challenge_eligibility", JSONB(), nullable=True),
        sa.Column("cancel_reason", sa.Text(), nullable=True),
        sa.Column("template_id", sa.BigInteger(), nullable=True),
        sa.Column("version", sa.String(3), nullable=False, server_default="v3"),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_activity_user_id", sa.String(45), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_created_at", "projects", ["created_at"])
    op.create_index("ix_projects_name", "projects", ["name"])
    op.create_index("ix_projects_type", "projects", ["type"])
    op.create_index("ix_projects_status", "projects", ["status"])
    op.create_index("ix_projects_direct_project_id", "projects", ["direct_project_id"])

    # Create project_members table
    op.create_table(
        "project_members",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("role", sa.String(45), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
    )
    op.create_index("ix_project_members_user_id", "project_members", ["user_id"])
    op.create_index("ix_project_members_project_id", "project_members", ["project_id"])

    # Create project_member_invites table
    op.create_table(
        "project_member_invites",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("role", sa.String(45), nullable=False),
        sa.Column("status", sa.String(45), nullable=False, server_default="pending"),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
    )
    op.create_index("ix_project_member_invites_project_id", "project_member_invites", ["project_id"])
    op.create_index("ix_project_member_invites_user_id", "project_member_invites", ["user_id"])
    op.create_index("ix_project_member_invites_email", "project_member_invites", ["email"])

    # Create project_attachments table
    op.create_table(
        "project_attachments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("size", sa.Integer(), nullable=True),
        sa.Column("category", sa.String(45), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("path", sa.String(2048), nullable=False),
        sa.Column("content_type", sa.String(255), nullable=True),
        sa.Column("tags", JSONB(), nullable=False, server_default="[]"),
        sa.Column("allowed_users", JSONB(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
    )
    op.create_index("ix_project_attachments_project_id", "project_attachments", ["project_id"])

    # Create project_phases table
    op.create_table(
        "project_phases",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("status", sa.String(45), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("budget", sa.Float(), nullable=False, server_default="0"),
        sa.Column("spent_budget", sa.Float(), nullable=False, server_default="0"),
        sa.Column("progress", sa.Float(), nullable=False, server_default="0"),
        sa.Column("details", JSONB(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
    )
    op.create_index("ix_project_phases_project_id", "project_phases", ["project_id"])

    # Create phase_products table
    op.create_table(
        "phase_products",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("phase_id", sa.BigInteger(), nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("direct_project_id", sa.BigInteger(), nullable=True),
        sa.Column("billing_account_id", sa.BigInteger(), nullable=True),
        sa.Column("template_id", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("type", sa.String(255), nullable=True),
        sa.Column("estimated_price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("actual_price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("details", JSONB(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["phase_id"], ["project_phases.id"]),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
    )
    op.create_index("ix_phase_products_phase_id", "phase_products", ["phase_id"])
    op.create_index("ix_phase_products_project_id", "phase_products", ["project_id"])

    # Versioned metadata tables
    _create_metadata_table("form", "config")
    _create_metadata_table("plan_config", "phases")
    _create_metadata_table("price_config", "config")


def downgrade() -> None:
    """Drop all tables."""
    for name in ("price_config", "plan_config", "form"):
        op.drop_index(f"ix_{name}_key_version_revision", table_name=name)
        op.drop_table(name)
    op.drop_table("phase_products")
    op.drop_table("project_phases")
    op.drop_table("project_attachments")
    op.drop_table("project_member_invites")
    op.drop_table("project_members")
    op.drop_table("projects")
