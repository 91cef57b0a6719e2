"""Frame a selection set as a query or mutation document."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .models import OperationType

__all__ = ["build_document", "variable_type"]

_SCALARS: tuple[tuple[type, str], ...] = (
    # bool first: it is a subclass of int
    (bool, "Boolean"),
    (int, "Int"),
    (float, "Float"),
    (str, "String"),
)


def variable_type(value: Any) -> str:
    """Infer the GraphQL type of a variable from its value.

    Values are always non-null, so every type carries ``!``.  Pydantic
    models and enums map to their class name, which must therefore match
    the input type name in the schema.

    Raises
    ------
    TypeError
        If the type cannot be inferred from the value.
    """
    # Before scalars: a StrEnum member is also a str.
    if isinstance(value, BaseModel | Enum):
        return f"{type(value).__name__}!"
    for pytype, name in _SCALARS:
        if isinstance(value, pytype):
            return f"{name}!"
    if isinstance(value, list | tuple):
        if not value:
            raise TypeError("cannot infer GraphQL type of an empty list")
        return f"[{variable_type(value[0])}]!"
    raise TypeError(
        f"cannot infer GraphQL type of {type(value).__name__} value"
    )


def build_document(
    operation: OperationType,
    selection: str,
    variables: Mapping[str, Any] | None = None,
    *,
    operation_name: str | None = None,
    variable_types: Mapping[str, str] | None = None,
) -> str:
    """Build ``<kind> [name]($var:Type,...){selection}``.

    Explicit ``variable_types`` take precedence over inference.
    """
    variable_types = variable_types or {}
    declarations = []
    for name, value in (variables or {}).items():
        gqltype = variable_types.get(name) or variable_type(value)
        declarations.append(f"${name}:{gqltype}")

    document = operation.value
    if operation_name:
        document += f" {operation_name}"
    if declarations:
        document += f"({','.join(declarations)})"
    return f"{document}{{{selection}}}"
