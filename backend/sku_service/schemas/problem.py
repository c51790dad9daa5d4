"""RFC 7807 problem details payload"""

from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, Field

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetail(BaseModel):
    """Error body returned with Content-Type application/problem+json"""
    type: str = Field(..., description="URI identifying the problem type")
    title: str
    status: int
    detail: Optional[str] = None
    instance: Optional[str] = Field(None, description="Request path that produced the problem")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    trace_id: Optional[str] = None
    request_id: Optional[str] = None
    errors: Optional[Dict[str, str]] = Field(None, description="Field name to validation message")

    def to_content(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
