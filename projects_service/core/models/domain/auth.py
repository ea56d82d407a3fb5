"""Authenticated caller model."""

from __future__ import annotations

from typing import List, Optional

from pydantic import ConfigDict, Field

from ..base import BaseSchema


class AuthUser(BaseSchema):
    """
    The caller of an API request, decoded from its bearer token.

    Machine-to-machine callers have no roles; they act through ``scopes`` and
    are recorded under the configured default machine user id.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    handle: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    scopes: List[str] = Field(default_factory=list)
    is_machine: bool = False
