"""Minimalist wrapper around the docker command line.

We must be able to authenticate to the registry, build an image, and
push it.  Authentication is a header docker adds to every registry
request, configured through ``config.json``.
"""

import json
import os
import subprocess
from pathlib import Path

import structlog
from pydantic import SecretStr

from ..exceptions import DockerError

AUTH_HEADER = "X-Meta-Authorization"


class DockerClient:
    """Build and push images with the docker CLI.

    Parameters
    ----------
    registry
        Registry host images are tagged for.
    docker
        Docker executable.
    config_dir
        Directory docker reads ``config.json`` from.  Defaults to
        ``~/.docker``.
    context
        Build context directory.
    """

    def __init__(
        self,
        registry: str,
        *,
        docker: str = "docker",
        config_dir: Path | None = None,
        context: Path = Path(),
    ) -> None:
        self._registry = registry
        self._docker = docker
        self._config_dir = config_dir or Path.home() / ".docker"
        self._context = context
        self._logger = structlog.get_logger(__name__)

    def image_location(self, image_name: str, image_tag: str) -> str:
        return f"{self._registry}/{image_name}:{image_tag}"

    def write_config(self, token: SecretStr) -> Path:
        """Make docker send the bearer token to the registry.

        Overwrites any existing ``config.json``.
        """
        self._logger.info("Updating Docker config...")
        config = {
            "HttpHeaders": {
                AUTH_HEADER: f"Bearer {token.get_secret_value()}",
            }
        }
        config_file = self._config_dir / "config.json"
        try:
            self._config_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd = os.open(
                config_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600
            )
            with os.fdopen(fd, "w") as fh:
                fh.write(json.dumps(config, indent=2))
            # The creation mode does not apply to an existing file.
            config_file.chmod(0o600)
        except OSError as exc:
            raise DockerError(f"cannot write {config_file}: {exc}") from exc
        self._logger.info("Docker config updated.")
        return config_file

    def build(
        self,
        image_name: str,
        image_tag: str,
        *,
        dockerfile_path: Path | None = None,
        dockerfile: str | None = None,
    ) -> str:
        """Build and tag the image; return its location.

        Inline ``dockerfile`` text wins over ``dockerfile_path``, and is
        written to ``Dockerfile`` in the build context.  Build output
        goes straight to the action log.
        """
        self._logger.info("Building Docker image...")
        location = self.image_location(image_name, image_tag)
        if dockerfile:
            dockerfile_path = self._context / "Dockerfile"
            try:
                dockerfile_path.write_text(dockerfile)
            except OSError as exc:
                raise DockerError(
                    f"cannot write {dockerfile_path}: {exc}"
                ) from exc
        if dockerfile_path is None:
            raise DockerError(
                "either dockerfilePath or dockerfile must be set"
            )
        self._run(
            [
                "build",
                "-f",
                str(dockerfile_path),
                "-t",
                location,
                str(self._context),
            ]
        )
        self._logger.info(f"Docker image built: {location}")
        return location

    def push(self, image_name: str, image_tag: str) -> str:
        """Push the image; return the combined command output."""
        self._logger.info("Pushing Docker image...")
        location = self.image_location(image_name, image_tag)
        output = self._run(["push", location], capture=True)
        self._logger.info(f"Docker image pushed: {location}")
        return output

    def _run(self, args: list[str], *, capture: bool = False) -> str:
        cmd = [self._docker, *args]
        self._logger.debug(f"Running {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                check=True,
                text=True,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.STDOUT if capture else None,
            )
        except FileNotFoundError as exc:
            raise DockerError(f"{self._docker} not found") from exc
        except subprocess.CalledProcessError as exc:
            raise DockerError(
                f"docker {args[0]} failed with exit code {exc.returncode}",
                output=exc.output,
            ) from exc
        return proc.stdout or ""
