"""newsrag API layer -- routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router
from src.api.schemas import (
    AgentRequest,
    ErrorResponse,
    HealthResponse,
    SearchRequest,
    SearchResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "AgentRequest",
    "ErrorResponse",
    "HealthResponse",
    "SearchRequest",
    "SearchResponse",
]
