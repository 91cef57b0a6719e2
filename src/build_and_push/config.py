"""Configuration for the build-and-push action."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Self

import yaml
from pydantic import (
    BeforeValidator,
    Field,
    HttpUrl,
    SecretStr,
    model_validator,
)
from safir.pydantic import CamelCaseModel

AUTH_URL = (
    "https://auth.trynova.ai/realms/default/protocol/openid-connect/token"
)
REGISTRY = "registry.trynova.ai"
API_URL = "https://api.trynova.ai/graphql"


def _empty_str_is_none(inp: Any) -> Any:
    # Action inputs that are not set arrive as empty strings.
    if isinstance(inp, str) and inp == "":
        return None
    return inp


class EndpointConfig(CamelCaseModel):
    """Services the action talks to."""

    auth_url: Annotated[
        HttpUrl,
        Field(
            title="Auth URL",
            description="OAuth2 token endpoint (client credentials grant).",
            examples=[HttpUrl(AUTH_URL)],
        ),
    ] = HttpUrl(AUTH_URL)

    registry: Annotated[
        str,
        Field(
            title="Registry",
            description="Container registry host images are pushed to.",
            examples=[REGISTRY],
        ),
    ] = REGISTRY

    api_url: Annotated[
        HttpUrl,
        Field(
            title="API URL",
            description="GraphQL endpoint artifacts are recorded with.",
            examples=[HttpUrl(API_URL)],
        ),
    ] = HttpUrl(API_URL)

    docker: Annotated[
        str,
        Field(
            title="Docker",
            description="Docker executable.",
        ),
    ] = "docker"

    docker_config_dir: Annotated[
        Path | None,
        BeforeValidator(_empty_str_is_none),
        Field(
            title="Docker config directory",
            description=(
                "Directory docker reads config.json from; defaults to "
                "~/.docker."
            ),
        ),
    ] = None

    @classmethod
    def from_file(cls, path: Path) -> Self:
        return cls.model_validate(yaml.safe_load(path.read_text()) or {})


class ActionConfig(CamelCaseModel):
    """Inputs for one run of the action."""

    client_id: Annotated[
        str,
        Field(
            title="Client ID",
            description="OAuth2 client ID.",
        ),
    ]

    secret: Annotated[
        SecretStr,
        Field(
            title="Secret",
            description="OAuth2 client secret.",
        ),
    ]

    image_name: Annotated[
        str,
        Field(
            title="Image name",
            description="Image name within the registry.",
            examples=["my-service"],
        ),
    ]

    image_tag: Annotated[
        str,
        Field(
            title="Image tag",
            description="Image tag; also the recorded artifact version.",
            examples=["1.0.0"],
        ),
    ]

    artifact_id: Annotated[
        str,
        Field(
            title="Artifact ID",
            description="Artifact to associate the image with.",
        ),
    ]

    dockerfile_path: Annotated[
        Path | None,
        BeforeValidator(_empty_str_is_none),
        Field(
            title="Dockerfile path",
            description="Path to the Dockerfile.",
        ),
    ] = None

    dockerfile: Annotated[
        str | None,
        BeforeValidator(_empty_str_is_none),
        Field(
            title="Dockerfile",
            description=(
                "Inline Dockerfile content.  Takes precedence over "
                "dockerfile_path."
            ),
        ),
    ] = None

    context: Annotated[
        Path,
        Field(
            title="Build context",
            description="Directory passed to docker build.",
        ),
    ] = Path()

    endpoints: Annotated[
        EndpointConfig,
        Field(
            title="Endpoints",
            description="Services the action talks to.",
            default_factory=EndpointConfig,
        ),
    ]

    debug: Annotated[
        bool,
        Field(
            title="Debug",
            description=(
                "Verbose logging, and raw GraphQL requests and responses "
                "attached to errors."
            ),
        ),
    ] = False

    @model_validator(mode="after")
    def _validate_dockerfile(self) -> Self:
        if self.dockerfile is None and self.dockerfile_path is None:
            raise ValueError(
                "either dockerfilePath or dockerfile must be set"
            )
        return self
