"""Build, push, and record a container image."""

import logging
from dataclasses import dataclass

import structlog

from ..config import ActionConfig
from ..factory import Factory


@dataclass(frozen=True)
class PublishResult:
    """What a successful run produced."""

    location: str
    artifact_node_id: str


def configure_logging(debug: bool) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(log_level)
    )


class Publisher:
    """Runs the steps of the action, in order.

    Each step raises an `~build_and_push.exceptions.ActionError` on
    failure, which ends the run: later steps depend on the earlier ones
    (no push without a token, no artifact without a pushed image).
    """

    def __init__(self, cfg: ActionConfig, factory: Factory) -> None:
        # Establish debugging first.
        configure_logging(cfg.debug)
        self._cfg = cfg
        self._factory = factory
        self._logger = structlog.get_logger(__name__)
        self._logger.debug("Initialized logging")

    def run(self) -> PublishResult:
        cfg = self._cfg
        self._logger.info("Starting Docker Push Action...")
        self._logger.info(
            f"ClientId: {cfg.client_id}, ImageName: {cfg.image_name}, "
            f"ImageTag: {cfg.image_tag}"
        )

        token = self._factory.create_oauth_client().get_bearer_token(
            cfg.client_id, cfg.secret
        )

        docker = self._factory.create_docker_client()
        docker.write_config(token.access_token)
        location = docker.build(
            cfg.image_name,
            cfg.image_tag,
            dockerfile_path=cfg.dockerfile_path,
            dockerfile=cfg.dockerfile,
        )
        output = docker.push(cfg.image_name, cfg.image_tag)
        self._logger.debug(f"Push output: {output}")

        self._factory.create_outputs().set_output("location", location)

        artifacts = self._factory.create_artifact_client(token)
        node_id = artifacts.add_artifact(
            cfg.artifact_id, cfg.image_tag, location
        )

        self._logger.info("Docker Push Action completed successfully.")
        return PublishResult(location=location, artifact_node_id=node_id)
