"""Exceptions raised by the action steps."""

__all__ = [
    "ActionError",
    "ArtifactError",
    "DockerError",
    "OutputError",
    "TokenError",
]


class ActionError(Exception):
    """A step of the action failed; the run cannot continue."""


class TokenError(ActionError):
    """Could not obtain a usable bearer token."""


class DockerError(ActionError):
    """A docker command failed.

    Parameters
    ----------
    message
        What failed.
    output
        Captured output of the command, if any.
    """

    def __init__(self, message: str, output: str | None = None) -> None:
        super().__init__(message)
        self.output = output

    def __str__(self) -> str:
        msg = super().__str__()
        if self.output:
            msg += f"\nOutput: {self.output}"
        return msg


class ArtifactError(ActionError):
    """The artifact could not be recorded."""


class OutputError(ActionError):
    """A step output could not be published."""
