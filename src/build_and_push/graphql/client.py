"""Client for a GraphQL endpoint over HTTP."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Self

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .errors import ErrorCode, GraphQLError, NetworkError
from .models import (
    GraphQLRequestPayload,
    GraphQLResponseEnvelope,
    GraphQLResult,
    OperationType,
    RawGraphQLResult,
)
from .operation import build_document

__all__ = ["GraphQLClient", "RequestModifier"]

type RequestModifier = Callable[[httpx.Request], None]
"""Hook run on the outgoing request right before it is sent."""


@dataclass
class _Exchange:
    """Outcome of one HTTP round trip, before typed decoding."""

    data: Any = None
    extensions: Any = None
    errors: list[GraphQLError] = field(default_factory=list)
    response: httpx.Response | None = None


class GraphQLClient:
    """Send GraphQL operations and decode their responses.

    Every call is independent: the client only holds its configuration,
    and derived clients (`with_request_modifier`, `with_debug`) are new
    objects sharing the same URL and HTTP client.  A client can therefore
    be shared between threads if the underlying `httpx.Client` is.

    Failures are never raised.  They are returned, in order, in the
    ``errors`` of the result, next to whatever data the server did
    return.

    Parameters
    ----------
    url
        GraphQL endpoint.
    http_client
        HTTP client used to send requests.  A new `httpx.Client` is
        created if none is given.
    request_modifier
        Called with each outgoing request, once, just before it is sent.
        Used to add authentication headers.
    debug
        If true, raw request and response (headers and body) are attached
        to errors under ``extensions["internal"]``.  This includes
        authentication headers, so it is off by default.
    """

    def __init__(
        self,
        url: str,
        http_client: httpx.Client | None = None,
        *,
        request_modifier: RequestModifier | None = None,
        debug: bool = False,
    ) -> None:
        self._url = url
        self._http_client = (
            http_client if http_client is not None else httpx.Client()
        )
        self._request_modifier = request_modifier
        self._debug = debug
        self._logger = structlog.get_logger(__name__)

    @property
    def url(self) -> str:
        return self._url

    @property
    def debug(self) -> bool:
        return self._debug

    def with_request_modifier(self, modifier: RequestModifier) -> Self:
        """Return a copy of this client using ``modifier``.

        The copy shares the HTTP client (and so its connection pool),
        which allows, for instance, one client per tenant with different
        authentication headers.
        """
        return type(self)(
            self._url,
            self._http_client,
            request_modifier=modifier,
            debug=self._debug,
        )

    def with_debug(self, debug: bool) -> Self:
        """Return a copy of this client with debug capture set."""
        return type(self)(
            self._url,
            self._http_client,
            request_modifier=self._request_modifier,
            debug=debug,
        )

    def query[T](
        self,
        selection: str,
        output: type[T],
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str | None = None,
        variable_types: Mapping[str, str] | None = None,
        extensions: type | None = None,
    ) -> GraphQLResult[T]:
        """Run ``selection`` as a query and decode ``data`` as ``output``."""
        return self._do(
            OperationType.QUERY,
            selection,
            output,
            variables,
            operation_name=operation_name,
            variable_types=variable_types,
            extensions=extensions,
        )

    def mutate[T](
        self,
        selection: str,
        output: type[T],
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str | None = None,
        variable_types: Mapping[str, str] | None = None,
        extensions: type | None = None,
    ) -> GraphQLResult[T]:
        """Run ``selection`` as a mutation and decode ``data`` as
        ``output``.
        """
        return self._do(
            OperationType.MUTATION,
            selection,
            output,
            variables,
            operation_name=operation_name,
            variable_types=variable_types,
            extensions=extensions,
        )

    def execute[T](
        self,
        document: str,
        output: type[T],
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str | None = None,
        extensions: type | None = None,
    ) -> GraphQLResult[T]:
        """Run a complete, caller-built document.

        Parameters
        ----------
        document
            Full query or mutation text.
        output
            Type ``data`` is validated into.  Anything pydantic can
            validate works: models, dataclasses, ``dict[str, Any]``.
        variables
            Variable values.  Pydantic models are serialized by alias.
        operation_name
            Sent as ``operationName``.
        extensions
            If given, ``extensions`` is validated into this type.
            Otherwise it is returned as plain JSON data.

        Returns
        -------
        GraphQLResult
            Decoded data, extensions, and every error collected.
        """
        exchange = self._request(document, variables, operation_name)
        return self._process(exchange, output, extensions)

    def execute_raw(
        self,
        document: str,
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str | None = None,
    ) -> RawGraphQLResult:
        """Run a complete document and return undecoded JSON data."""
        exchange = self._request(document, variables, operation_name)
        return RawGraphQLResult(
            data=exchange.data,
            extensions=exchange.extensions,
            errors=exchange.errors,
        )

    def _do[T](
        self,
        operation: OperationType,
        selection: str,
        output: type[T],
        variables: Mapping[str, Any] | None,
        *,
        operation_name: str | None,
        variable_types: Mapping[str, str] | None,
        extensions: type | None,
    ) -> GraphQLResult[T]:
        try:
            document = build_document(
                operation,
                selection,
                variables,
                operation_name=operation_name,
                variable_types=variable_types,
            )
        except TypeError as exc:
            error = GraphQLError.from_exception(ErrorCode.GRAPHQL_ENCODE, exc)
            return GraphQLResult(errors=[error])
        return self.execute(
            document,
            output,
            variables,
            operation_name=operation_name,
            extensions=extensions,
        )

    def _request(
        self,
        document: str,
        variables: Mapping[str, Any] | None,
        operation_name: str | None,
    ) -> _Exchange:
        try:
            payload = GraphQLRequestPayload(
                query=document,
                variables=(
                    to_jsonable_python(variables, by_alias=True)
                    if variables
                    else None
                ),
                operation_name=operation_name,
            )
            body = payload.to_json()
        except (PydanticSerializationError, ValidationError) as exc:
            error = GraphQLError.from_exception(ErrorCode.JSON_ENCODE, exc)
            return _Exchange(errors=[error])

        try:
            request = self._http_client.build_request(
                "POST",
                self._url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.InvalidURL as exc:
            error = GraphQLError.from_exception(
                ErrorCode.REQUEST_ERROR,
                exc,
                f"problem constructing request: {exc}",
            )
            return _Exchange(errors=[error])

        if self._request_modifier is not None:
            self._request_modifier(request)

        self._logger.debug(
            f"Sending GraphQL request to {self._url}",
            operation_name=operation_name,
        )
        try:
            response = self._http_client.send(request)
        except httpx.DecodingError as exc:
            # Raised while undoing the response content-encoding.
            error = GraphQLError.from_exception(
                ErrorCode.JSON_DECODE,
                exc,
                f"problem decoding response body: {exc}",
            )
            return _Exchange(errors=[self._with_request(error, request)])
        except httpx.HTTPError as exc:
            error = GraphQLError.from_exception(ErrorCode.REQUEST_ERROR, exc)
            return _Exchange(errors=[self._with_request(error, request)])

        if not response.is_success:
            self._logger.debug(
                f"GraphQL endpoint returned HTTP {response.status_code}"
            )
            error = GraphQLError.from_exception(
                ErrorCode.REQUEST_ERROR,
                NetworkError(response.status_code, response.text),
            )
            return _Exchange(
                errors=[self._with_request(error, request)],
                response=response,
            )

        try:
            envelope = GraphQLResponseEnvelope.model_validate_json(
                response.content
            )
        except ValidationError as exc:
            error = GraphQLError.from_exception(ErrorCode.JSON_DECODE, exc)
            if self._debug:
                error = error.with_request(request, request.content)
                error = error.with_response(response)
            return _Exchange(errors=[error], response=response)

        errors = list(envelope.errors or [])
        if errors and self._debug and not errors[0].has_request_capture():
            errors[0] = errors[0].with_request(request, request.content)
            errors[0] = errors[0].with_response(response)

        return _Exchange(
            data=envelope.data,
            extensions=envelope.extensions,
            errors=errors,
            response=response,
        )

    def _process[T](
        self,
        exchange: _Exchange,
        output: type[T],
        extensions: type | None,
    ) -> GraphQLResult[T]:
        result: GraphQLResult[T] = GraphQLResult(
            extensions=exchange.extensions, errors=list(exchange.errors)
        )

        if exchange.data is not None:
            try:
                result.data = TypeAdapter(output).validate_python(
                    exchange.data
                )
            except ValidationError as exc:
                error = GraphQLError.from_exception(
                    ErrorCode.GRAPHQL_DECODE, exc
                )
                if self._debug and exchange.response is not None:
                    error = error.with_response(exchange.response)
                result.errors.append(error)

        if exchange.extensions is not None and extensions is not None:
            try:
                result.extensions = TypeAdapter(extensions).validate_python(
                    exchange.extensions
                )
            except ValidationError as exc:
                result.extensions = None
                result.errors.append(
                    GraphQLError.from_exception(
                        ErrorCode.GRAPHQL_EXTENSIONS_DECODE, exc
                    )
                )

        if result.errors:
            self._logger.debug(
                f"GraphQL call returned {len(result.errors)} error(s)"
            )
        return result

    def _with_request(
        self, error: GraphQLError, request: httpx.Request
    ) -> GraphQLError:
        if not self._debug:
            return error
        return error.with_request(request, request.content)
