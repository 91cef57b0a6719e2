"""Artifact registration through the GraphQL API."""

from collections.abc import Iterable

import httpx
import structlog

from ..exceptions import ArtifactError
from ..graphql import GraphQLClient, GraphQLErrors, RequestModifier
from ..models.artifact import (
    AddArtifactInput,
    AddArtifactMutation,
    ArtifactType,
    RegistryArtifactInput,
    TagInput,
)
from ..models.token import BearerToken

ADD_ARTIFACT = "addArtifact(input: $input){id}"

ORGANIZATION_HEADER = "x-organization"


def tenant_headers(token: BearerToken) -> RequestModifier:
    """Request modifier authenticating as ``token`` for its tenant."""

    def modify(request: httpx.Request) -> None:
        request.headers["Authorization"] = token.authorization
        request.headers[ORGANIZATION_HEADER] = token.organization_id

    return modify


class ArtifactClient:
    """Record artifact versions."""

    def __init__(self, graphql: GraphQLClient) -> None:
        self._graphql = graphql
        self._logger = structlog.get_logger(__name__)

    def add_artifact(
        self,
        artifact_id: str,
        version: str,
        url: str,
        tags: Iterable[TagInput] = (),
    ) -> str:
        """Record a registry artifact version and return its ID."""
        self._logger.info("Adding artifact to GraphQL API...")
        artifact = AddArtifactInput(
            type=ArtifactType.REGISTRY,
            artifact_id=artifact_id,
            version=version,
            tags=list(tags),
            registry=RegistryArtifactInput(url=url),
        )
        result = self._graphql.mutate(
            ADD_ARTIFACT, AddArtifactMutation, {"input": artifact}
        )
        try:
            result.raise_for_errors()
        except GraphQLErrors as exc:
            raise ArtifactError(f"failed to add artifact: {exc}") from exc
        if result.data is None:
            raise ArtifactError("failed to add artifact: no data returned")
        node_id = result.data.add_artifact.id
        self._logger.info(f"Artifact added successfully with ID: {node_id}")
        return node_id
