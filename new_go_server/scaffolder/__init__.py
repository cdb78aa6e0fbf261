"""Project scaffolder -- renders the payload manifest into a project tree.

Quick usage::

    from new_go_server.config import ParameterSet
    from new_go_server.scaffolder import DEFAULT_MANIFEST, FileMaterializer, TemplateRenderer, TemplateSource

    params = ParameterSet.from_inputs(name="acme", module="github.com/acme/api")
    renderer = TemplateRenderer()
    source = TemplateSource()
    for entry in DEFAULT_MANIFEST:
        rendered = renderer.render(source.read(entry.source_id), params)
        await FileMaterializer().materialize(entry, rendered, root)
"""

from new_go_server.scaffolder.manifest import (
    DEFAULT_MANIFEST,
    ManifestEntry,
    ManifestError,
    TemplateSource,
    validate_manifest,
)
from new_go_server.scaffolder.materializer import FileMaterializer, StagingArea
from new_go_server.scaffolder.templates import TemplateRenderer

__all__ = [
    "DEFAULT_MANIFEST",
    "FileMaterializer",
    "ManifestEntry",
    "ManifestError",
    "StagingArea",
    "TemplateRenderer",
    "TemplateSource",
    "validate_manifest",
]
