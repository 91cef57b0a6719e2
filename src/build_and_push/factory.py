"""Component factory."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Self

import httpx
import structlog
from structlog.stdlib import BoundLogger

from .config import ActionConfig
from .graphql import GraphQLClient
from .models.token import BearerToken
from .storage.artifacts import ArtifactClient, tenant_headers
from .storage.docker import DockerClient
from .storage.oauth import OAuthClient
from .storage.outputs import ActionOutputs


class Factory:
    """Build action components.

    All HTTP traffic goes through one `httpx.Client`, owned by the
    factory.

    Parameters
    ----------
    config
        Action configuration.
    http_client
        Shared HTTP client.
    logger
        Logger to use for messages.
    """

    @classmethod
    @contextmanager
    def standalone(
        cls,
        config: ActionConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> Iterator[Self]:
        """Context manager for action components.

        Parameters
        ----------
        config
            Action configuration.
        transport
            HTTP transport to use instead of the network.  Intended for
            the test suite.

        Yields
        ------
        Factory
            Newly-created factory.  Its HTTP client is closed on exit.
        """
        logger = structlog.get_logger(__name__)
        with httpx.Client(transport=transport) as http_client:
            yield cls(config, http_client, logger)

    def __init__(
        self,
        config: ActionConfig,
        http_client: httpx.Client,
        logger: BoundLogger,
    ) -> None:
        self._config = config
        self._http_client = http_client
        self._logger = logger

    def create_oauth_client(self) -> OAuthClient:
        return OAuthClient(
            self._http_client, str(self._config.endpoints.auth_url)
        )

    def create_docker_client(self) -> DockerClient:
        endpoints = self._config.endpoints
        return DockerClient(
            endpoints.registry,
            docker=endpoints.docker,
            config_dir=endpoints.docker_config_dir,
            context=self._config.context,
        )

    def create_graphql_client(self) -> GraphQLClient:
        """Unauthenticated GraphQL client for the API."""
        return GraphQLClient(
            str(self._config.endpoints.api_url),
            self._http_client,
            debug=self._config.debug,
        )

    def create_artifact_client(self, token: BearerToken) -> ArtifactClient:
        self._logger.debug(
            f"Creating artifact client for {token.organization_id}"
        )
        graphql = self.create_graphql_client().with_request_modifier(
            tenant_headers(token)
        )
        return ArtifactClient(graphql)

    def create_outputs(self) -> ActionOutputs:
        return ActionOutputs()
