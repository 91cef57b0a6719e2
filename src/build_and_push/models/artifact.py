"""Models for the artifact registration mutation."""

from enum import Enum
from typing import Annotated

from pydantic import Field
from safir.pydantic import CamelCaseModel


class ArtifactType(Enum):
    """Kind of artifact being recorded.  Each kind carries its own
    location details in the mutation input.
    """

    REGISTRY = "registry"


class TagInput(CamelCaseModel):
    """Free-form key/value label attached to an artifact version."""

    key: str
    value: str


class RegistryArtifactInput(CamelCaseModel):
    """Where a registry artifact can be pulled from."""

    url: Annotated[
        str,
        Field(
            title="URL",
            description="Image location, including registry and tag.",
            examples=["registry.trynova.ai/my-image:1.0.0"],
        ),
    ]


class AddArtifactInput(CamelCaseModel):
    """Input for the ``addArtifact`` mutation.

    The class name is the GraphQL input type name.
    """

    type: ArtifactType = ArtifactType.REGISTRY

    artifact_id: Annotated[
        str,
        Field(
            title="Artifact ID",
            description="Artifact the new version belongs to.",
        ),
    ]

    version: Annotated[
        str,
        Field(title="Version", description="Version (usually image tag)."),
    ]

    tags: list[TagInput] = Field(default_factory=list)

    registry: RegistryArtifactInput


class AddArtifactPayload(CamelCaseModel):
    id: str


class AddArtifactMutation(CamelCaseModel):
    """Response data of the ``addArtifact`` mutation."""

    add_artifact: AddArtifactPayload
