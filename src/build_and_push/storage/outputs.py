"""Step outputs for GitHub Actions."""

import os
import uuid
from pathlib import Path

import structlog

from ..exceptions import OutputError


class ActionOutputs:
    """Publish step outputs.

    Outputs are appended to the file named by ``GITHUB_OUTPUT``.  Runners
    too old to set it only understand the ``::set-output`` workflow
    command, which is printed instead.
    """

    def __init__(self, output_file: Path | None = None) -> None:
        if output_file is None:
            env = os.getenv("GITHUB_OUTPUT")
            output_file = Path(env) if env else None
        self._output_file = output_file
        self._logger = structlog.get_logger(__name__)

    def set_output(self, name: str, value: str) -> None:
        self._logger.info(f"Setting output: {name}={value}")
        if self._output_file is None:
            print(f"::set-output name={name}::{value}", flush=True)
            return
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            line = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            line = f"{name}={value}\n"
        try:
            with self._output_file.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as exc:
            raise OutputError(
                f"cannot write output {name} to {self._output_file}: {exc}"
            ) from exc
