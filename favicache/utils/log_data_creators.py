"""A utility module for log data creation"""

from datetime import datetime
from typing import Any, Optional

from asgi_correlation_id.context import correlation_id
from pydantic import BaseModel, field_serializer
from starlette.requests import Request
from starlette.types import Message


class RequestSummaryLogDataModel(BaseModel):
    """Log metadata for the request summary of every endpoint."""

    errno: int
    time: datetime
    path: str
    method: str
    agent: Optional[str] = None
    lang: Optional[str] = None
    querystring: dict[str, Any]
    code: int
    rid: Optional[str] = None

    @field_serializer("time")
    def serialize_time(self, time: datetime) -> str:
        """Convert the datetime to an iso-formatted string."""
        return time.isoformat()


def create_request_summary_log_data(
    request: Request, message: Message, dt: datetime
) -> RequestSummaryLogDataModel:
    """Create log data for API endpoints."""
    return RequestSummaryLogDataModel(
        errno=0,
        time=dt,
        agent=request.headers.get("User-Agent"),
        path=request.url.path,
        method=request.method,
        lang=request.headers.get("Accept-Language"),
        querystring=dict(request.query_params),
        code=message["status"],
        rid=correlation_id.get(),
    )
