"""
Error envelope shared by every analytics endpoint.

  INSUFFICIENT_DATA  422  details.minimum_required
  VALIDATION_ERROR   422  details.errors: list[ErrorDetail]
  CALCULATION_ERROR  400  details vary by failing input
  INTERNAL_ERROR     500  no details
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """One rejected request field."""
    field: str = Field(examples=["records.3.completed_at"])
    message: str
    type: str


class ErrorResponse(BaseModel):
    code: str = Field(examples=["INSUFFICIENT_DATA"])
    message: str = Field(examples=["Need at least 7 data points for 4W trend analysis"])
    details: Optional[dict[str, Any]] = Field(
        default=None,
        examples=[{"minimum_required": 7}],
    )
