"""Jinja2 template rendering for project payloads.

The payload templates reference parameters with Go-style field syntax,
``{{.Module}}`` or ``{{.Name | upper}}``.  :class:`GoFieldSyntax` rewrites
those references into plain Jinja expressions before parsing, and the
environment is locked down so that only the registered helpers and the
parameter fields can be used.  Any other action is a :class:`TemplateError`.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError
from jinja2 import TemplateError as JinjaTemplateError
from jinja2.ext import Extension

from new_go_server.config import ParameterSet
from new_go_server.errors import TemplateError

# ---------------------------------------------------------------------------
# Helpers available inside templates
# ---------------------------------------------------------------------------


def _upper_filter(value: Any) -> str:
    """Upper-case the string form of ``value``."""
    return str(value).upper()


HELPERS: Mapping[str, Callable[[Any], str]] = {
    "upper": _upper_filter,
}


# ---------------------------------------------------------------------------
# Go field syntax
# ---------------------------------------------------------------------------

_ACTION = re.compile(r"\{\{(-?)(.*?)(-?)\}\}", re.DOTALL)
_FIELD_ACTION = re.compile(r"\s*\.([A-Za-z_]\w*)\s*(?:\|\s*([A-Za-z_]\w*)\s*)?")


class GoFieldSyntax(Extension):
    """Turn ``{{.Field}}`` and ``{{.Field | helper}}`` into Jinja expressions.

    Any other action between ``{{`` and ``}}`` is a syntax error, so the
    payloads cannot reach Jinja's expression language.
    """

    def preprocess(self, source: str, name: str | None, filename: str | None = None) -> str:
        def _rewrite(match: re.Match[str]) -> str:
            left, action, right = match.groups()
            field = _FIELD_ACTION.fullmatch(action)
            if field is None:
                lineno = source.count("\n", 0, match.start()) + 1
                raise TemplateSyntaxError(
                    f"unsupported action {{{{{action.strip()}}}}} on line {lineno}; "
                    "expected {{.Field}} or {{.Field | helper}}",
                    lineno,
                    name,
                    filename,
                )
            attribute, helper = field.groups()
            expression = f"{attribute} | {helper}" if helper else attribute
            return f"{{{{{left} {expression} {right}}}}}"

        return _ACTION.sub(_rewrite, source)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders payload templates against a :class:`ParameterSet`.

    Rendering is pure: the same body and parameters always give the same
    bytes, and CRLF line endings in a payload are kept.  Unknown fields
    and exceptions raised by helpers fail at render time; unknown helpers
    and anything other than a field reference between ``{{`` and ``}}``
    fail at parse time.  Both surface as :class:`TemplateError`.
    """

    def __init__(self, helpers: Mapping[str, Callable[[Any], str]] | None = None) -> None:
        self.env = Environment(
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            extensions=[GoFieldSyntax],
        )
        # Closed helper set: drop Jinja's built-ins before registering ours.
        self.env.filters.clear()
        self.env.tests.clear()
        self.env.globals.clear()
        self.env.filters.update(helpers if helpers is not None else HELPERS)
        # Jinja rewrites every line ending to newline_sequence; CRLF payloads get their own view.
        self._crlf_env = self.env.overlay(newline_sequence="\r\n")

    # -- String rendering ---------------------------------------------------

    def render_string(self, template_string: str, context: Mapping[str, Any], *, name: str = "") -> str:
        """Render an inline template string with the provided context.

        Args:
            template_string: Template text using ``{{.Field}}`` placeholders.
            context: Field values, keyed by field name.
            name: Template name used in error messages.

        Raises:
            TemplateError: If the template cannot be parsed, or if anything
                raises while it executes (including a helper).
        """
        env = self._crlf_env if "\r\n" in template_string else self.env
        try:
            template = env.from_string(template_string)
        except JinjaTemplateError as exc:
            raise TemplateError(f"parse error: {exc}", template=name) from exc

        try:
            return template.render(**context)
        except Exception as exc:
            raise TemplateError(f"execution error: {exc}", template=name) from exc

    # -- Payload rendering --------------------------------------------------

    def render(self, body: bytes, params: ParameterSet, *, name: str = "") -> bytes:
        """Render a raw payload body and return the UTF-8 encoded result."""
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateError(f"template is not valid UTF-8: {exc}", template=name) from exc

        return self.render_string(text, params.context(), name=name).encode("utf-8")
