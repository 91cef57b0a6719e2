"""Test fixtures for the build-and-push action."""

import subprocess
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import jwt
import pytest
from pydantic import HttpUrl

from build_and_push.config import ActionConfig, EndpointConfig

AUTH_URL = "https://auth.example.com/token"
API_URL = "https://api.example.com/graphql"
REGISTRY = "registry.example.com"
ORGANIZATION = "org-1234"

type Handler = Callable[[httpx.Request], httpx.Response]


def make_token(claims: dict[str, object] | None = None) -> str:
    """Unverified JWT, as the identity provider would issue it."""
    if claims is None:
        claims = {"sub": "client", "organization_id": ORGANIZATION}
    return jwt.encode(
        claims, "signing-key-only-used-by-the-test-suite", algorithm="HS256"
    )


@pytest.fixture
def access_token() -> str:
    return make_token()


@pytest.fixture
def mock_http() -> Iterator[Callable[[Handler], httpx.Client]]:
    """Build HTTP clients answering with a handler, closed after the
    test.
    """
    clients: list[httpx.Client] = []

    def build(handler: Handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield build
    for client in clients:
        client.close()


@pytest.fixture
def action_config(tmp_path: Path) -> ActionConfig:
    """Config for a run against fake endpoints."""
    context = tmp_path / "context"
    context.mkdir()
    return ActionConfig(
        client_id="client",
        secret="hunter2",
        image_name="my-service",
        image_tag="1.2.3",
        artifact_id="artifact-1",
        dockerfile_path=context / "Dockerfile",
        context=context,
        endpoints=EndpointConfig(
            auth_url=HttpUrl(AUTH_URL),
            api_url=HttpUrl(API_URL),
            registry=REGISTRY,
            docker_config_dir=tmp_path / "docker-config",
        ),
    )


@dataclass
class FakeDocker:
    """Records docker invocations instead of running them."""

    calls: list[list[str]] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    output: str = "pushed"

    def run(
        self, cmd: list[str], **kwargs: object
    ) -> subprocess.CompletedProcess[str]:
        self.calls.append(cmd)
        subcommand = cmd[1]
        if subcommand in self.failures:
            raise subprocess.CalledProcessError(
                1, cmd, output=self.failures[subcommand]
            )
        return subprocess.CompletedProcess(cmd, 0, stdout=self.output)


@pytest.fixture
def fake_docker(monkeypatch: pytest.MonkeyPatch) -> FakeDocker:
    docker = FakeDocker()
    monkeypatch.setattr(subprocess, "run", docker.run)
    return docker


@pytest.fixture
def github_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """File GitHub Actions collects step outputs from."""
    path = tmp_path / "github_output"
    path.touch()
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))
    return path
