"""Minimal GraphQL client: one HTTP POST per operation, errors as values."""

from .client import GraphQLClient, RequestModifier
from .errors import (
    ErrorCode,
    GraphQLError,
    GraphQLErrors,
    Location,
    NetworkError,
)
from .models import (
    GraphQLRequestPayload,
    GraphQLResponseEnvelope,
    GraphQLResult,
    OperationType,
    RawGraphQLResult,
)
from .operation import build_document, variable_type

__all__ = [
    "ErrorCode",
    "GraphQLClient",
    "GraphQLError",
    "GraphQLErrors",
    "GraphQLRequestPayload",
    "GraphQLResponseEnvelope",
    "GraphQLResult",
    "Location",
    "NetworkError",
    "OperationType",
    "RawGraphQLResult",
    "RequestModifier",
    "build_document",
    "variable_type",
]
