"""
API Schemas.

Every response body (success or error) is a v4 envelope::

    {
        "id": "<request id>",
        "version": "v4",
        "result": {
            "success": true,
            "status": 200,
            "metadata": {"totalCount": 3},
            "content": ...
        }
    }

``metadata`` is only filled for list responses.
"""

from typing import Any, Dict, Optional

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from .core.constant import API_VERSION


class ResultMetadata(BaseModel):
    """Pagination metadata of a list response."""

    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(alias="totalCount")


class EnvelopeResult(BaseModel):
    """The ``result`` object of a v4 envelope."""

    success: bool = Field(description="Whether the request succeeded.")
    status: int = Field(description="HTTP status code, repeated in the body.")
    metadata: Optional[ResultMetadata] = Field(default=None, description="Pagination metadata for lists.")
    content: Any = Field(default=None, description="The response payload.")


class Envelope(BaseModel):
    """v4 response envelope."""

    id: Optional[str] = Field(default=None, description="Request id, echoed from X-Request-Id.")
    version: str = API_VERSION
    result: EnvelopeResult


def get_request_id(request: Request) -> Optional[str]:
    """Request id assigned by the request context middleware."""
    return getattr(request.state, "request_id", None)


def wrap_response(
    request_id: Optional[str],
    content: Any,
    total_count: Optional[int] = None,
    status_code: int = 200,
) -> Dict[str, Any]:
    """Build a success envelope as a JSON-ready dict."""
    metadata = ResultMetadata(total_count=total_count) if total_count is not None else None
    envelope = Envelope(
        id=request_id,
        result=EnvelopeResult(success=True, status=status_code, metadata=metadata, content=content),
    )
    return envelope.model_dump(mode="json", by_alias=True)


def wrap_error(request_id: Optional[str], status_code: int, message: str, details: Any = None) -> Dict[str, Any]:
    """Build an error envelope as a JSON-ready dict."""
    content: Dict[str, Any] = {"message": message}
    if details is not None:
        content["details"] = details
    envelope = Envelope(
        id=request_id,
        result=EnvelopeResult(success=False, status=status_code, content=content),
    )
    return envelope.model_dump(mode="json", by_alias=True)
