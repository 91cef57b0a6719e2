"""Structured errors produced by the GraphQL request pipeline."""

from collections.abc import Iterator
from enum import StrEnum
from http import HTTPStatus
from typing import Any, Self

import httpx
from pydantic import BaseModel, PrivateAttr

__all__ = [
    "ErrorCode",
    "GraphQLError",
    "GraphQLErrors",
    "Location",
    "NetworkError",
]


class ErrorCode(StrEnum):
    """Classification of locally-produced pipeline failures.

    The value is what appears as ``extensions["code"]`` on the error, so
    locally produced errors and server-side errors can be inspected the
    same way.
    """

    REQUEST_ERROR = "request_error"
    JSON_ENCODE = "json_encode_error"
    JSON_DECODE = "json_decode_error"
    GRAPHQL_ENCODE = "graphql_encode_error"
    GRAPHQL_DECODE = "graphql_decode_error"
    GRAPHQL_EXTENSIONS_DECODE = "graphql_extensions_decode_error"


class NetworkError(Exception):
    """The GraphQL endpoint answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        try:
            phrase = HTTPStatus(status_code).phrase
        except ValueError:
            phrase = ""
        super().__init__(f"{status_code} {phrase}".rstrip())


class Location(BaseModel):
    """Position in the request document an error refers to."""

    line: int
    column: int


class GraphQLError(BaseModel):
    """One entry of the ``errors`` array of a GraphQL response.

    Errors raised locally by the pipeline (transport failures, decode
    failures) use the same shape, with the classification stored in
    ``extensions["code"]`` and the underlying exception kept as
    ``cause``.
    """

    message: str = ""
    extensions: dict[str, Any] | None = None
    locations: list[Location] | None = None
    path: list[str | int] | None = None

    _cause: BaseException | None = PrivateAttr(default=None)

    @classmethod
    def from_exception(
        cls, code: ErrorCode, exc: BaseException, message: str | None = None
    ) -> Self:
        """Wrap a local failure as a classified error."""
        error = cls(
            message=message if message is not None else str(exc),
            extensions={"code": code.value},
        )
        error._cause = exc
        return error

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def code(self) -> str | None:
        """Machine-readable classification, if the error carries one."""
        if self.extensions is None:
            return None
        code = self.extensions.get("code")
        return str(code) if code is not None else None

    def has_request_capture(self) -> bool:
        internal = (self.extensions or {}).get("internal")
        return isinstance(internal, dict) and "request" in internal

    def with_request(self, request: httpx.Request, body: bytes) -> Self:
        """Return a copy carrying the outgoing request for diagnostics."""
        return self._with_internal(
            "request",
            {
                "headers": dict(request.headers),
                "body": body.decode(errors="replace"),
            },
        )

    def with_response(self, response: httpx.Response) -> Self:
        """Return a copy carrying the received response for diagnostics."""
        return self._with_internal(
            "response",
            {
                "headers": dict(response.headers),
                "body": response.text,
            },
        )

    def _with_internal(self, key: str, value: dict[str, Any]) -> Self:
        extensions = dict(self.extensions or {})
        internal = extensions.get("internal")
        internal = dict(internal) if isinstance(internal, dict) else {}
        internal[key] = value
        extensions["internal"] = internal
        # model_copy carries private attributes, so the cause survives.
        return self.model_copy(update={"extensions": extensions})

    def __str__(self) -> str:
        return (
            f"Message: {self.message}, Locations: {self.locations}, "
            f"Extensions: {self.extensions}, Path: {self.path}"
        )


class GraphQLErrors(Exception):
    """Ordered, non-empty collection of errors from one GraphQL call."""

    def __init__(self, errors: list[GraphQLError]) -> None:
        if not errors:
            raise ValueError("GraphQLErrors requires at least one error")
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    def __iter__(self) -> Iterator[GraphQLError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __getitem__(self, index: int) -> GraphQLError:
        return self.errors[index]

    @property
    def causes(self) -> list[BaseException]:
        return [e.cause for e in self.errors if e.cause is not None]
