"""Unit tests for parameter collection (new_go_server.prompts)."""

from __future__ import annotations

import argparse

import pytest

from new_go_server import prompts
from new_go_server.errors import ParameterError
from new_go_server.prompts import PROMPTS, collect_parameters, prompt_line, resolve_field

pytestmark = pytest.mark.unit


class ScriptedAnswers:
    """Answers prompts from a fixed mapping and records what was asked."""

    def __init__(self, answers: dict[str, str] | None = None) -> None:
        self.answers = answers or {}
        self.asked: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.asked.append(prompt)
        return self.answers.get(prompt, "")


def _args(**overrides) -> argparse.Namespace:
    values = {"name": None, "module": None, "description": None, "port": "8080", "path": None}
    values.update(overrides)
    return argparse.Namespace(**values)


# ---------------------------------------------------------------------------
# resolve_field
# ---------------------------------------------------------------------------


class TestResolveField:
    def test_flag_value_wins(self):
        ask = ScriptedAnswers()
        assert resolve_field("acme", "Project name: ", ask) == "acme"
        assert ask.asked == []

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_value_prompts(self, value):
        ask = ScriptedAnswers({"Project name: ": "acme"})
        assert resolve_field(value, "Project name: ", ask) == "acme"
        assert ask.asked == ["Project name: "]

    def test_prompt_answer_is_trimmed(self):
        ask = ScriptedAnswers({"Q: ": "  padded value \n"})
        assert resolve_field(None, "Q: ", ask) == "padded value"

    def test_empty_answer_stays_empty(self):
        assert resolve_field(None, "Q: ", ScriptedAnswers()) == ""


# ---------------------------------------------------------------------------
# collect_parameters
# ---------------------------------------------------------------------------


class TestCollectParameters:
    def test_all_flags_supplied_never_prompts(self):
        ask = ScriptedAnswers()
        params = collect_parameters(
            _args(name="acme", module="api", description="Orders", port="9000", path="/tmp/acme"),
            ask=ask,
        )
        assert ask.asked == []
        assert params.name == "acme"
        assert params.module == "acme/api"
        assert params.description == "Orders"
        assert params.port == "9000"
        assert params.destination_path == "/tmp/acme"

    def test_missing_flags_prompt_in_order(self):
        ask = ScriptedAnswers(
            {
                PROMPTS["name"]: "acme",
                PROMPTS["module"]: "github.com/acme/api",
                PROMPTS["description"]: "Orders",
                PROMPTS["path"]: "",
            }
        )
        params = collect_parameters(_args(), ask=ask)

        assert ask.asked == [PROMPTS["name"], PROMPTS["module"], PROMPTS["description"], PROMPTS["path"]]
        assert params.module == "github.com/acme/api"
        assert params.destination_path == "acme"

    def test_empty_port_flag_prompts_and_defaults(self):
        ask = ScriptedAnswers()
        params = collect_parameters(
            _args(name="acme", module="api", description="x", port="", path="acme"), ask=ask
        )
        assert ask.asked == [PROMPTS["port"]]
        assert params.port == "8080"

    def test_base_dir_applies_to_empty_path(self):
        params = collect_parameters(
            _args(name="acme", module="api", description="x"),
            ask=ScriptedAnswers(),
            base_dir="/srv/projects",
        )
        assert params.destination_path == "/srv/projects/acme"

    def test_missing_name_raises_parameter_error(self):
        with pytest.raises(ParameterError):
            collect_parameters(_args(module="api"), ask=ScriptedAnswers())


# ---------------------------------------------------------------------------
# prompt_line
# ---------------------------------------------------------------------------


class TestPromptLine:
    def test_reads_from_console(self, monkeypatch):
        monkeypatch.setattr(prompts.console, "input", lambda prompt: "typed")
        assert prompt_line("Project name: ") == "typed"

    def test_end_of_input_is_empty(self, monkeypatch):
        def _eof(prompt):
            raise EOFError

        monkeypatch.setattr(prompts.console, "input", _eof)
        assert prompt_line("Project name: ") == ""
