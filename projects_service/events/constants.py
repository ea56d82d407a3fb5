"""Bus topics published by the projects service."""

from __future__ import annotations

from enum import Enum


class BusTopic(str, Enum):
    """Topics of the events posted to the bus API."""

    PROJECT_DRAFT_CREATED = "project.draft-created"
    PROJECT_UPDATED = "project.updated"
    PROJECT_DELETED = "project.deleted"

    PROJECT_MEMBER_ADDED = "project.member.added"
    PROJECT_MEMBER_UPDATED = "project.member.updated"
    PROJECT_MEMBER_REMOVED = "project.member.removed"

    PROJECT_MEMBER_INVITE_CREATED = "project.member.invite.created"
    PROJECT_MEMBER_INVITE_UPDATED = "project.member.invite.updated"
    PROJECT_MEMBER_INVITE_DELETED = "project.member.invite.deleted"

    # Metadata changes (forms, plan configs, price configs); the payload names the resource.
    PROJECT_METADATA_CREATE = "project.action.create"
    PROJECT_METADATA_UPDATE = "project.action.update"
    PROJECT_METADATA_DELETE = "project.action.delete"


BUS_MIME_TYPE = "application/json"
