"""Test framing of query and mutation documents."""

from enum import StrEnum

import pytest

from build_and_push.graphql import OperationType, build_document
from build_and_push.graphql.operation import variable_type
from build_and_push.models.artifact import (
    AddArtifactInput,
    RegistryArtifactInput,
    TagInput,
)


class Color(StrEnum):
    RED = "red"


def test_variable_type() -> None:
    assert variable_type(True) == "Boolean!"
    assert variable_type(3) == "Int!"
    assert variable_type(1.5) == "Float!"
    assert variable_type("x") == "String!"
    assert variable_type(Color.RED) == "Color!"
    assert variable_type([TagInput(key="a", value="b")]) == "[TagInput!]!"
    artifact = AddArtifactInput(
        artifact_id="a",
        version="1",
        registry=RegistryArtifactInput(url="r/a:1"),
    )
    assert variable_type(artifact) == "AddArtifactInput!"


@pytest.mark.parametrize("value", [None, [], {"a": 1}])
def test_variable_type_unknown(value: object) -> None:
    with pytest.raises(TypeError):
        variable_type(value)


def test_build_document() -> None:
    document = build_document(OperationType.QUERY, "viewer{id}")
    assert document == "query{viewer{id}}"
    assert (
        build_document(
            OperationType.MUTATION,
            "rename(id: $id, name: $name){id}",
            {"id": 1, "name": "new"},
            operation_name="Rename",
        )
        == "mutation Rename($id:Int!,$name:String!)"
        "{rename(id: $id, name: $name){id}}"
    )


def test_build_document_explicit_types() -> None:
    """Explicit types win, and allow values that cannot be inferred."""
    document = build_document(
        OperationType.QUERY,
        "search(filter: $filter, limit: $limit){id}",
        {"filter": {"name": "x"}, "limit": 3},
        variable_types={"filter": "SearchFilter", "limit": "Int"},
    )
    assert document == (
        "query($filter:SearchFilter,$limit:Int)"
        "{search(filter: $filter, limit: $limit){id}}"
    )
