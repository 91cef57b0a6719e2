"""CLI for the build-and-push action."""

import argparse
import os
import sys
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from .config import ActionConfig, EndpointConfig
from .exceptions import ActionError
from .factory import Factory
from .services.publisher import Publisher, configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Positional arguments come in the order the action passes its inputs.
    Inputs that were not set arrive as empty strings.
    """
    parser = argparse.ArgumentParser(
        description=(
            "Build a container image, push it, and record it as an "
            "artifact version."
        )
    )
    parser.add_argument("client_id", help="OAuth2 client ID")
    parser.add_argument("secret", help="OAuth2 client secret")
    parser.add_argument("image_name", help="image name")
    parser.add_argument("image_tag", help="image tag")
    parser.add_argument("artifact_id", help="artifact to associate with")
    parser.add_argument(
        "dockerfile_path", nargs="?", default="", help="path to Dockerfile"
    )
    parser.add_argument(
        "dockerfile", nargs="?", default="", help="inline Dockerfile content"
    )
    parser.add_argument(
        "-c",
        "--config-file",
        type=Path,
        help="YAML file with endpoint and docker settings",
        default=None,
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
        default=False,
    )
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> ActionConfig:
    endpoints = (
        EndpointConfig.from_file(args.config_file)
        if args.config_file
        else EndpointConfig()
    )
    # Re-running a job with debug logging sets RUNNER_DEBUG.
    debug = args.debug or os.getenv("RUNNER_DEBUG") == "1"
    return ActionConfig(
        client_id=args.client_id,
        secret=args.secret,
        image_name=args.image_name,
        image_tag=args.image_tag,
        artifact_id=args.artifact_id,
        dockerfile_path=args.dockerfile_path,
        dockerfile=args.dockerfile,
        endpoints=endpoints,
        debug=debug,
    )


def main(argv: list[str] | None = None) -> int:
    """Run the action; return the process exit status."""
    args = _parse_args(argv)
    logger = structlog.get_logger(__name__)
    try:
        cfg = _load_config(args)
    except ValidationError as exc:
        configure_logging(args.debug)
        logger.error(f"Invalid inputs: {exc}")
        return 1
    except (OSError, yaml.YAMLError) as exc:
        configure_logging(args.debug)
        logger.error(f"Cannot read config file {args.config_file}: {exc}")
        return 1
    try:
        with Factory.standalone(cfg) as factory:
            Publisher(cfg, factory).run()
    except ActionError as exc:
        logger.error(str(exc))
        return 1
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
