"""
Base Schemas.

Standard API response envelopes. The front end reads flat payloads
(``{success, task}``, ``{success, tasks, stats}``), so success responses
add their fields next to ``success`` instead of nesting them under ``data``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ApiResponse(BaseModel):
    """
    Base success envelope.

    Endpoint responses subclass this and add their payload fields.
    """

    success: bool = True

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    error: str
    code: str
    details: dict[str, Any] | None = None
    request_id: str | None = None
