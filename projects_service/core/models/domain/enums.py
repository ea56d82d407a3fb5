"""Domain enums for projects, members, invites and metadata."""

from __future__ import annotations

from enum import Enum


class ProjectStatus(str, Enum):
    """
    Lifecycle status of a project.

    Projects are created as ``draft``; ``cancelled`` requires a cancel reason.
    """

    draft = "draft"
    in_review = "in_review"
    reviewed = "reviewed"
    active = "active"
    completed = "completed"
    paused = "paused"
    cancelled = "cancelled"


class InviteStatus(str, Enum):
    """Status of a project member invite."""

    pending = "pending"  # Sent to a user or email, waiting for an answer.
    accepted = "accepted"
    refused = "refused"
    requested = "requested"  # Requested by a member, waiting for a manager to approve.
    request_approved = "request_approved"
    request_rejected = "request_rejected"
    canceled = "canceled"


class MetadataResource(str, Enum):
    """Versioned metadata resources exposed under ``/v4/projects/metadata``."""

    form = "form"
    plan_config = "planConfig"
    price_config = "priceConfig"


# Statuses a project can be moved to by callers outside ROLES_COPILOT_AND_ABOVE.
CUSTOMER_ALLOWED_STATUSES = frozenset({ProjectStatus.draft, ProjectStatus.in_review, ProjectStatus.cancelled})

# Invite statuses that can still be answered.
OPEN_INVITE_STATUSES = frozenset({InviteStatus.pending, InviteStatus.requested})

# Answers that turn an invite into a membership.
ACCEPTING_INVITE_STATUSES = frozenset({InviteStatus.accepted, InviteStatus.request_approved})
