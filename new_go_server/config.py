"""new-go-server configuration.

Two kinds of configuration live here:

* ``ParameterSet`` -- the five user-supplied generation parameters, resolved
  and defaulted once per run and frozen afterwards.
* ``Config`` -- generator settings (base directory, template directory,
  bootstrap command) that normally come from the environment.

Both use Pydantic v2 models so invariants are enforced at construction time.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from new_go_server.errors import ParameterError

DEFAULT_PORT = "8080"

ENV_DEFAULT_DIR = "NEW_GO_SERVER_DEFAULT_DIR"
ENV_TEMPLATE_DIR = "NEW_GO_SERVER_TEMPLATE_DIR"
ENV_BOOTSTRAP_COMMAND = "NEW_GO_SERVER_BOOTSTRAP_COMMAND"
ENV_BOOTSTRAP_TIMEOUT = "NEW_GO_SERVER_BOOTSTRAP_TIMEOUT"


# ---------------------------------------------------------------------------
# Generation parameters
# ---------------------------------------------------------------------------


def normalize_module(name: str, module: str) -> str:
    """Return ``module`` as a module path.

    A bare identifier such as ``"api"`` becomes ``"<name>/api"``; anything that
    already contains a ``/`` is returned unchanged.
    """
    if "/" in module:
        return module
    return f"{name}/{module}"


def default_destination(name: str, base_dir: str | None = None) -> str:
    """Return the destination used when no path was supplied."""
    if base_dir:
        return os.path.join(base_dir, name)
    return name


class ParameterSet(BaseModel):
    """Resolved generation parameters.

    Use :meth:`from_inputs` to build one from raw strings; it applies the
    defaulting rules and reports problems as :class:`ParameterError`.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name, also the default directory name")
    module: str = Field(..., description="Go module path")
    description: str = Field(default="", description="Short project description")
    port: str = Field(default=DEFAULT_PORT, description="Server port")
    destination_path: str = Field(default="", description="Where the project is written")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name is required")
        if value in {".", ".."} or "/" in value or os.sep in value:
            raise ValueError(f"project name must be a single directory name, got '{value}'")
        return value

    @field_validator("module")
    @classmethod
    def _check_module(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("module name is required")
        if "/" not in value:
            raise ValueError(f"module '{value}' is not a module path")
        return value

    @field_validator("port")
    @classmethod
    def _check_port(cls, value: str) -> str:
        value = value.strip()
        if not value.isdigit() or not 1 <= int(value) <= 65535:
            raise ValueError(f"port must be a number between 1 and 65535, got '{value}'")
        return value

    @field_validator("destination_path")
    @classmethod
    def _check_destination(cls, value: str) -> str:
        if not value:
            raise ValueError("destination path is required")
        return value

    @classmethod
    def from_inputs(
        cls,
        *,
        name: str,
        module: str,
        description: str = "",
        port: str = "",
        destination_path: str = "",
        base_dir: str | None = None,
    ) -> "ParameterSet":
        """Apply the defaulting rules to raw inputs and validate the result.

        Raises:
            ParameterError: If a required value is missing or invalid.
        """
        name = name.strip()
        module = module.strip()
        if not name:
            raise ParameterError("project name is required")
        if not module:
            raise ParameterError("module name is required")

        try:
            return cls(
                name=name,
                module=normalize_module(name, module),
                description=description,
                port=port.strip() or DEFAULT_PORT,
                destination_path=destination_path.strip() or default_destination(name, base_dir),
            )
        except ValidationError as exc:
            messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in exc.errors())
            raise ParameterError(messages) from exc

    def context(self) -> dict[str, Any]:
        """Return the template fields, keyed the way the payload references them."""
        return {
            "Name": self.name,
            "Module": self.module,
            "Description": self.description,
            "Port": self.port,
            "ProjectPath": self.destination_path,
        }


# ---------------------------------------------------------------------------
# Generator settings
# ---------------------------------------------------------------------------


class BootstrapConfig(BaseModel):
    """Settings for the post-generation dependency step."""

    command: list[str] = Field(default_factory=lambda: ["go", "mod", "tidy"], min_length=1)
    descriptor: str = Field(
        default="go.mod", description="File that must exist before the command runs"
    )
    timeout: int = Field(default=300, ge=0, description="Seconds before the command is killed; 0 disables")


class Config(BaseModel):
    """Global generator configuration.

    Instances are usually created by :meth:`from_env` in the CLI entry point
    and passed to the :class:`~new_go_server.pipeline.Pipeline`.
    """

    base_dir: str | None = Field(default=None, description="Parent for destinations derived from the name")
    template_dir: Path | None = Field(default=None, description="Alternate payload directory")
    atomic: bool = Field(default=False, description="Stage files and move them into place at the end")
    verbose: bool = False
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            NEW_GO_SERVER_DEFAULT_DIR, NEW_GO_SERVER_TEMPLATE_DIR,
            NEW_GO_SERVER_BOOTSTRAP_COMMAND, NEW_GO_SERVER_BOOTSTRAP_TIMEOUT.
        """
        bootstrap_kwargs: dict[str, Any] = {}
        if os.environ.get(ENV_BOOTSTRAP_COMMAND):
            bootstrap_kwargs["command"] = shlex.split(os.environ[ENV_BOOTSTRAP_COMMAND])
        if os.environ.get(ENV_BOOTSTRAP_TIMEOUT):
            bootstrap_kwargs["timeout"] = int(os.environ[ENV_BOOTSTRAP_TIMEOUT])

        template_dir = os.environ.get(ENV_TEMPLATE_DIR)
        return cls(
            base_dir=os.environ.get(ENV_DEFAULT_DIR) or None,
            template_dir=Path(template_dir) if template_dir else None,
            bootstrap=BootstrapConfig(**bootstrap_kwargs),
        )
