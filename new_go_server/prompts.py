"""Parameter collection: command-line flags first, interactive prompts second.

Each field goes through :func:`resolve_field`, which keeps a non-empty flag
value and otherwise asks the user.  Empty answers are passed on as empty
strings so that :meth:`ParameterSet.from_inputs` can apply its defaults.
"""

from __future__ import annotations

import argparse
from typing import Callable

from new_go_server.config import ParameterSet
from new_go_server.utils import console

Ask = Callable[[str], str]

PROMPTS: dict[str, str] = {
    "name": "Project name: ",
    "module": "Go module name (e.g., github.com/username/project): ",
    "description": "Project description: ",
    "port": "Server port [8080]: ",
    "path": (
        "Project path (leave empty to create in current directory, "
        "or specify absolute/relative path): "
    ),
}


def prompt_line(prompt: str) -> str:
    """Read a single line from standard input; end of input counts as empty."""
    try:
        return console.input(prompt)
    except EOFError:
        return ""


def resolve_field(value: str | None, prompt: str, ask: Ask = prompt_line) -> str:
    """Return ``value`` if it was supplied, otherwise the trimmed prompt answer."""
    if value:
        return value
    return ask(prompt).strip()


def collect_parameters(
    args: argparse.Namespace,
    ask: Ask = prompt_line,
    base_dir: str | None = None,
) -> ParameterSet:
    """Build the :class:`ParameterSet` for a run from parsed CLI arguments.

    Fields are resolved in a fixed order (name, module, description, port,
    path) so the prompts appear in the same sequence every time.

    Raises:
        ParameterError: If the collected values are incomplete or invalid.
    """
    name = resolve_field(args.name, PROMPTS["name"], ask)
    module = resolve_field(args.module, PROMPTS["module"], ask)
    description = resolve_field(args.description, PROMPTS["description"], ask)
    port = resolve_field(args.port, PROMPTS["port"], ask)
    path = resolve_field(args.path, PROMPTS["path"], ask)

    return ParameterSet.from_inputs(
        name=name,
        module=module,
        description=description,
        port=port,
        destination_path=path,
        base_dir=base_dir,
    )
