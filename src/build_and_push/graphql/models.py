"""Wire and result models for the GraphQL request pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel
from safir.pydantic import CamelCaseModel

from .errors import GraphQLError, GraphQLErrors

__all__ = [
    "GraphQLRequestPayload",
    "GraphQLResponseEnvelope",
    "GraphQLResult",
    "OperationType",
    "RawGraphQLResult",
]


class OperationType(Enum):
    """Operation kind; only changes how the document is framed."""

    QUERY = "query"
    MUTATION = "mutation"


class GraphQLRequestPayload(CamelCaseModel):
    """Body of a GraphQL POST request."""

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = None

    def to_json(self) -> bytes:
        return self.model_dump_json(
            by_alias=True, exclude_none=True
        ).encode()


class GraphQLResponseEnvelope(BaseModel):
    """Top-level GraphQL response.

    ``data`` and ``extensions`` stay untyped here.  They are validated
    against the caller's types later, each on its own, so that a failure
    in one does not hide the other.
    """

    data: Any = None
    extensions: Any = None
    errors: list[GraphQLError] | None = None


@dataclass
class RawGraphQLResult:
    """Untyped outcome of a GraphQL call."""

    data: Any = None
    extensions: Any = None
    errors: list[GraphQLError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        _raise_for_errors(self.errors)


@dataclass
class GraphQLResult[T]:
    """Typed outcome of a GraphQL call.

    Partial success is possible: ``data`` may be populated while
    ``errors`` is non-empty.  Callers must look at both.
    """

    data: T | None = None
    extensions: Any = None
    errors: list[GraphQLError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise `GraphQLErrors` if the call produced any errors."""
        _raise_for_errors(self.errors)


def _raise_for_errors(errors: list[GraphQLError]) -> None:
    if not errors:
        return
    cause = next((e.cause for e in errors if e.cause is not None), None)
    raise GraphQLErrors(errors) from cause
