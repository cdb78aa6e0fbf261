"""The fixed list of files a generated project consists of.

Each :class:`ManifestEntry` pairs a payload file (looked up by name in the
template directory) with the path it is written to inside the project.  The
default manifest is immutable; callers that need a different set, such as
tests, pass their own tuple to the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable

from new_go_server.errors import SourceReadError

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class ManifestError(ValueError):
    """Raised when a manifest violates its structural invariants."""


@dataclass(frozen=True)
class ManifestEntry:
    """One generated file."""

    source_id: str
    target: str


DEFAULT_MANIFEST: tuple[ManifestEntry, ...] = (
    # Core application files
    ManifestEntry("main.go", "main.go"),
    ManifestEntry("go.mod", "go.mod"),
    ManifestEntry("cmd_root.go", "cmd/root.go"),
    ManifestEntry("env_local", ".env.local"),
    ManifestEntry("gitignore", ".gitignore"),
    ManifestEntry("github_yml", ".github/workflows/ci.yml"),
    ManifestEntry("README.md", "README.md"),
    ManifestEntry("Makefile", "Makefile"),
    # Configuration
    ManifestEntry("internal_conf_vars.go", "internal/conf/vars.go"),
    ManifestEntry("internal_conf_pg.go", "internal/conf/pg.go"),
    ManifestEntry("internal_conf_dependencies.go", "internal/conf/dependencies.go"),
    # Shared utilities
    ManifestEntry("internal_shared_logger_logger.go", "internal/shared/logger/logger.go"),
    ManifestEntry("internal_shared_validation_validation.go", "internal/shared/validation/validation.go"),
    ManifestEntry("internal_shared_constants_constants.go", "internal/shared/constants/constants.go"),
    ManifestEntry("internal_shared_environment_environment.go", "internal/shared/environment/environment.go"),
    ManifestEntry("internal_shared_http_http.go", "internal/shared/http/http.go"),
    ManifestEntry("internal_shared_uuid_uuid.go", "internal/shared/uuid/uuid.go"),
    ManifestEntry("internal_shared_assertions_assertions.go", "internal/shared/assertions/assertions.go"),
    ManifestEntry("internal_shared_middleware_middleware.go", "internal/shared/middleware/middleware.go"),
    # Shared utility tests
    ManifestEntry(
        "internal_tests_shared_assertions_assertions_test.go",
        "internal/tests/shared/assertions/assertions_test.go",
    ),
    ManifestEntry(
        "internal_tests_shared_validation_validation_test.go",
        "internal/tests/shared/validation/validation_test.go",
    ),
    ManifestEntry(
        "internal_tests_shared_logger_logger_test.go",
        "internal/tests/shared/logger/logger_test.go",
    ),
    ManifestEntry(
        "internal_tests_shared_constants_constants_test.go",
        "internal/tests/shared/constants/constants_test.go",
    ),
    ManifestEntry(
        "internal_tests_shared_environment_environment_test.go",
        "internal/tests/shared/environment/environment_test.go",
    ),
    ManifestEntry("internal_tests_shared_http_http_test.go", "internal/tests/shared/http/http_test.go"),
    ManifestEntry("internal_tests_shared_uuid_uuid_test.go", "internal/tests/shared/uuid/uuid_test.go"),
    ManifestEntry(
        "internal_tests_shared_middleware_middleware_test.go",
        "internal/tests/shared/middleware/middleware_test.go",
    ),
    # Handlers
    ManifestEntry("internal_handlers_handlers.go", "internal/handlers/handlers.go"),
    # Health module
    ManifestEntry("internal_health_models_health.go", "internal/health/models/health.go"),
    ManifestEntry("internal_health_service_service.go", "internal/health/service/service.go"),
    ManifestEntry("internal_health_controller_controller.go", "internal/health/controller/controller.go"),
    # Users module
    ManifestEntry("internal_users_models_users.go", "internal/users/models/users.go"),
    ManifestEntry("internal_users_datasource_datasource.go", "internal/users/datasource/datasource.go"),
    ManifestEntry("internal_users_service_service.go", "internal/users/service/service.go"),
    ManifestEntry("internal_users_controller_controller.go", "internal/users/controller/controller.go"),
    # Organizations module
    ManifestEntry(
        "internal_organizations_models_organizations.go",
        "internal/organizations/models/organizations.go",
    ),
    ManifestEntry(
        "internal_organizations_datasource_datasource.go",
        "internal/organizations/datasource/datasource.go",
    ),
    ManifestEntry(
        "internal_organizations_service_service.go",
        "internal/organizations/service/service.go",
    ),
    ManifestEntry(
        "internal_organizations_controller_controller.go",
        "internal/organizations/controller/controller.go",
    ),
)


def validate_manifest(entries: Iterable[ManifestEntry]) -> tuple[ManifestEntry, ...]:
    """Check the structural invariants of a manifest and return it as a tuple.

    Targets must be unique, relative, and free of ``..`` segments; source
    ids must be plain file names.

    Raises:
        ManifestError: On the first violation found.
    """
    entries = tuple(entries)
    if not entries:
        raise ManifestError("manifest is empty")

    seen: set[str] = set()
    for entry in entries:
        if not entry.source_id or "/" in entry.source_id or "\\" in entry.source_id:
            raise ManifestError(f"source id must be a plain file name: '{entry.source_id}'")

        target = PurePosixPath(entry.target)
        if not entry.target or target.is_absolute() or "\\" in entry.target:
            raise ManifestError(f"target must be a relative POSIX path: '{entry.target}'")
        if ".." in target.parts or target == PurePosixPath("."):
            raise ManifestError(f"target escapes the project root: '{entry.target}'")

        normalized = target.as_posix()
        if normalized in seen:
            raise ManifestError(f"duplicate target: '{entry.target}'")
        seen.add(normalized)

    return entries


class TemplateSource:
    """Reads raw template payloads from a directory."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)

    def read(self, source_id: str) -> bytes:
        """Return the payload bytes for ``source_id``.

        Raises:
            SourceReadError: If the payload is missing or unreadable.
        """
        path = self.template_dir / source_id
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise SourceReadError(source_id, f"template not found: {path}") from exc
        except OSError as exc:
            raise SourceReadError(source_id, f"failed to read template {path}: {exc}") from exc
