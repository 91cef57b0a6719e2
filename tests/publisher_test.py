"""Test a full run of the action."""

import json
from pathlib import Path

import httpx
import pytest
from conftest import API_URL, AUTH_URL, ORGANIZATION, REGISTRY, FakeDocker

from build_and_push.config import ActionConfig
from build_and_push.exceptions import ArtifactError, DockerError, TokenError
from build_and_push.factory import Factory
from build_and_push.services.publisher import PublishResult, Publisher


class FakeApi:
    """Identity provider and GraphQL API in one transport."""

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token
        self.token_status = 200
        self.graphql_body: dict[str, object] = {
            "data": {"addArtifact": {"id": "node-42"}}
        }
        self.graphql_requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url == httpx.URL(AUTH_URL):
            if self.token_status != 200:
                return httpx.Response(self.token_status)
            return httpx.Response(
                200, json={"access_token": self.access_token}
            )
        if request.url == httpx.URL(API_URL):
            self.graphql_requests.append(request)
            return httpx.Response(200, json=self.graphql_body)
        return httpx.Response(404)


@pytest.fixture
def fake_api(access_token: str) -> FakeApi:
    return FakeApi(access_token)


def _run(cfg: ActionConfig, fake_api: FakeApi) -> PublishResult:
    transport = httpx.MockTransport(fake_api.handler)
    with Factory.standalone(cfg, transport=transport) as factory:
        return Publisher(cfg, factory).run()


def test_run(
    action_config: ActionConfig,
    fake_api: FakeApi,
    fake_docker: FakeDocker,
    github_output: Path,
    access_token: str,
) -> None:
    result = _run(action_config, fake_api)
    location = f"{REGISTRY}/my-service:1.2.3"

    assert result.location == location
    assert result.artifact_node_id == "node-42"

    config_dir = action_config.endpoints.docker_config_dir
    assert config_dir is not None
    docker_config = json.loads((config_dir / "config.json").read_text())
    assert docker_config["HttpHeaders"]["X-Meta-Authorization"] == (
        f"Bearer {access_token}"
    )

    assert [c[1] for c in fake_docker.calls] == ["build", "push"]
    assert fake_docker.calls[1] == ["docker", "push", location]
    assert github_output.read_text() == f"location={location}\n"

    (request,) = fake_api.graphql_requests
    assert request.headers["authorization"] == f"Bearer {access_token}"
    assert request.headers["x-organization"] == ORGANIZATION
    variables = json.loads(request.content)["variables"]
    assert variables["input"] == {
        "type": "registry",
        "artifactId": "artifact-1",
        "version": "1.2.3",
        "tags": [],
        "registry": {"url": location},
    }


def test_run_token_failure(
    action_config: ActionConfig,
    fake_api: FakeApi,
    fake_docker: FakeDocker,
    github_output: Path,
) -> None:
    """Nothing is built without a token."""
    fake_api.token_status = 403
    with pytest.raises(TokenError):
        _run(action_config, fake_api)
    assert fake_docker.calls == []
    assert fake_api.graphql_requests == []


def test_run_push_failure(
    action_config: ActionConfig,
    fake_api: FakeApi,
    fake_docker: FakeDocker,
    github_output: Path,
) -> None:
    fake_docker.failures["push"] = "unauthorized"
    with pytest.raises(DockerError):
        _run(action_config, fake_api)
    assert github_output.read_text() == ""
    assert fake_api.graphql_requests == []


def test_run_artifact_failure(
    action_config: ActionConfig,
    fake_api: FakeApi,
    fake_docker: FakeDocker,
    github_output: Path,
) -> None:
    fake_api.graphql_body = {
        "errors": [
            {
                "message": "artifact not found",
                "extensions": {"code": "NOT_FOUND"},
            }
        ]
    }
    with pytest.raises(ArtifactError, match="artifact not found"):
        _run(action_config, fake_api)
    # The image was pushed before the mutation failed.
    assert github_output.read_text().startswith("location=")
