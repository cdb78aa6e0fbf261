"""Error taxonomy for the project generator.

Every failure the generator can report is a ``GeneratorError`` subclass.  Each
subclass carries the pipeline stage it belongs to so that the CLI can print a
single line naming the failing stage and the underlying cause.
"""

from __future__ import annotations

__all__ = [
    "BootstrapError",
    "FileWriteError",
    "GeneratorError",
    "ParameterError",
    "PathError",
    "PreconditionError",
    "SourceReadError",
    "TemplateError",
]


class GeneratorError(Exception):
    """Base class for all generator failures."""

    stage = "generating project"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def describe(self) -> str:
        """Return the one-line, user-facing description of the failure."""
        return f"Error while {self.stage}: {self.message}"


class ParameterError(GeneratorError):
    """Raised when a required parameter is missing or invalid."""

    stage = "collecting parameters"


class PathError(GeneratorError):
    """Raised when the destination directory cannot be used."""

    stage = "validating path"

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class SourceReadError(GeneratorError):
    """Raised when a template payload is missing or unreadable."""

    stage = "materializing files"

    def __init__(self, source_id: str, message: str) -> None:
        self.source_id = source_id
        super().__init__(message)


class TemplateError(GeneratorError):
    """Raised when a template cannot be parsed or executed."""

    stage = "materializing files"

    def __init__(self, message: str, template: str = "") -> None:
        self.template = template
        if template:
            message = f"{template}: {message}"
        super().__init__(message)


class FileWriteError(GeneratorError):
    """Raised when a directory or file cannot be written."""

    stage = "materializing files"

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class PreconditionError(GeneratorError):
    """Raised when a file required by the bootstrap step was not generated."""

    stage = "bootstrapping module"


class BootstrapError(GeneratorError):
    """Raised when the dependency-resolution command fails.

    ``output`` holds the command's combined stdout/stderr verbatim.
    """

    stage = "bootstrapping module"

    def __init__(self, message: str, output: str = "", command: str = "") -> None:
        self.output = output
        self.command = command
        if output:
            message = f"{message}\nOutput: {output}"
        super().__init__(message)
