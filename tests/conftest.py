"""Shared pytest fixtures for the new-go-server test suite.

Provides reusable fixtures for:
- Temporary destination directories
- A resolved ParameterSet
- A small template directory and matching manifest
- Fake bootstrap commands built on the running Python interpreter
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from new_go_server.config import BootstrapConfig, Config, ParameterSet
from new_go_server.scaffolder.manifest import ManifestEntry

# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def destination(tmp_path: Path) -> Path:
    """Destination for a generated project; only its parent exists."""
    (tmp_path / "out").mkdir()
    return tmp_path / "out" / "acme"


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every NEW_GO_SERVER_* variable for the duration of the test."""
    for var in (
        "NEW_GO_SERVER_DEFAULT_DIR",
        "NEW_GO_SERVER_TEMPLATE_DIR",
        "NEW_GO_SERVER_BOOTSTRAP_COMMAND",
        "NEW_GO_SERVER_BOOTSTRAP_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


@pytest.fixture
def params(destination: Path) -> ParameterSet:
    """Parameters for a project called ``acme`` written to ``destination``."""
    return ParameterSet.from_inputs(
        name="acme",
        module="github.com/acme/api",
        description="Acme order service",
        port="9090",
        destination_path=str(destination),
    )


# ---------------------------------------------------------------------------
# Templates & manifest
# ---------------------------------------------------------------------------

SMALL_TEMPLATES: dict[str, str] = {
    "go.mod": "module {{.Module}}\n\ngo 1.22\n",
    "main.go": 'package main\n\n// {{.Name}} listens on {{.Port}}\nconst envPrefix = "{{.Name | upper}}_"\n',
    "README.md": "# {{.Name}}\n\n{{.Description}}\n",
    "handlers.go": 'package handlers\n\nimport "{{.Module}}/internal/conf"\n',
}


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A template directory holding the payloads used by ``small_manifest``."""
    directory = tmp_path / "templates"
    directory.mkdir()
    for name, body in SMALL_TEMPLATES.items():
        (directory / name).write_text(body, encoding="utf-8")
    return directory


@pytest.fixture
def small_manifest() -> tuple[ManifestEntry, ...]:
    """A four-entry manifest, including nested targets."""
    return (
        ManifestEntry("main.go", "main.go"),
        ManifestEntry("go.mod", "go.mod"),
        ManifestEntry("handlers.go", "internal/handlers/handlers.go"),
        ManifestEntry("README.md", "README.md"),
    )


# ---------------------------------------------------------------------------
# Bootstrap commands
# ---------------------------------------------------------------------------


def python_command(code: str) -> list[str]:
    """Return a command that runs ``code`` with the current interpreter."""
    return [sys.executable, "-c", code]


@pytest.fixture
def py_command():
    """Factory turning a Python snippet into a bootstrap command."""
    return python_command


@pytest.fixture
def ok_command() -> list[str]:
    """A bootstrap command that prints to both streams and succeeds."""
    return python_command(
        "import sys; print('go: finding module'); print('tidy done', file=sys.stderr)"
    )


@pytest.fixture
def failing_command() -> list[str]:
    """A bootstrap command that reports an error and exits 1."""
    return python_command(
        "import sys; print('go: github.com/missing/pkg: module not found', file=sys.stderr); sys.exit(1)"
    )


@pytest.fixture
def config_for(template_dir: Path):
    """Factory for a :class:`Config` pointing at ``template_dir``."""

    def factory(command: list[str], *, atomic: bool = False, timeout: int = 30) -> Config:
        return Config(
            template_dir=template_dir,
            atomic=atomic,
            bootstrap=BootstrapConfig(command=command, timeout=timeout),
        )

    return factory
