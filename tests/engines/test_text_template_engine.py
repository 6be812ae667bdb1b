"""Unit tests for engines.text.template_engine."""

from datetime import datetime
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from pydantic import BaseModel

from templating.engines.errors import CompilationError, ExecutionError, MarshalError
from templating.engines.marshal import marshal_environment
from templating.engines.text import TextTemplateEngine, parse_parameters


class TestTextTemplateEngineRender:
    def test_whitespace_trimmed(self) -> None:
        e = TextTemplateEngine()
        assert e.render("  Hello {{ name }}  \n", {"name": "Ann"}) == "Hello Ann"

    def test_multiline_keeps_inner_newlines(self) -> None:
        e = TextTemplateEngine()
        t = "\n{% for p in ports %}\n{{ p }}\n{% endfor %}\n"
        assert e.render(t, {"ports": [80, 443]}) == "80\n\n443"

    def test_nested_access(self) -> None:
        e = TextTemplateEngine()
        env = {"pod": {"labels": {"app": "web"}}}
        assert e.render("{{ pod.labels.app }}", env) == "web"
        assert e.render("{{ pod['labels']['app'] }}", env) == "web"

    def test_renders_marshaled_view(self) -> None:
        e = TextTemplateEngine()
        env = {"when": datetime(2024, 1, 2, 3, 4, 5), "ids": (1, 2)}
        assert e.render("{{ when }} {{ ids }}", env) == "2024-01-02T03:04:05 [1, 2]"

    def test_functions_as_filters_and_globals(self) -> None:
        e = TextTemplateEngine()
        assert e.render("{{ name | quote }}", {"name": "Ann"}) == '"Ann"'
        assert e.render("{{ snake_case(kind) }}", {"kind": "LoadBalancer"}) == "load_balancer"

    def test_builtin_filters(self) -> None:
        e = TextTemplateEngine()
        assert e.render("{{ name | upper }}", {"name": "ann"}) == "ANN"

    def test_empty_environment(self) -> None:
        assert TextTemplateEngine().render("static", {}) == "static"


class TestTextTemplateEngineLossyEnvironment:
    def test_function_value_absent(self) -> None:
        e = TextTemplateEngine()
        env = {"name": "Ann", "fn": lambda: "x"}
        assert e.render("{{ name }}{{ fn }}", env) == "Ann"
        assert e.render("{{ fn is defined }}", env) == "False"

    def test_reference_through_dropped_value_fails(self) -> None:
        e = TextTemplateEngine()
        with pytest.raises(ExecutionError):
            e.render("{{ fn.attr }}", {"fn": len})

    def test_model_with_callable_field(self) -> None:
        class Holder(BaseModel):
            name: str
            hook: Any = None

        out = TextTemplateEngine().render(
            "{{ h.name }}:{{ h.hook is defined }}", {"h": Holder(name="n", hook=len)}
        )
        assert out == "n:False"

    def test_unmarshalable_environment(self) -> None:
        with pytest.raises(MarshalError):
            TextTemplateEngine().render("{{ x }}", {"x": float("inf")})


class TestTextTemplateEngineErrors:
    def test_syntax_error_is_compilation_error(self) -> None:
        with pytest.raises(CompilationError, match="error parsing template") as exc:
            TextTemplateEngine().render("{% if %}", {})
        assert exc.value.engine == "template"

    @patch("templating.engines.text.template_engine.marshal_environment")
    def test_syntax_error_skips_marshal(self, mock_marshal: MagicMock) -> None:
        with pytest.raises(CompilationError):
            TextTemplateEngine().render("{{ unclosed", {"a": 1})
        mock_marshal.assert_not_called()

    @patch(
        "templating.engines.text.template_engine.marshal_environment",
        side_effect=marshal_environment,
    )
    def test_marshal_once_per_render(self, mock_marshal: MagicMock) -> None:
        TextTemplateEngine().render("{{ a }}", {"a": 1})
        mock_marshal.assert_called_once_with({"a": 1})

    def test_execution_error_includes_first_line(self) -> None:
        t = "{{ missing.field }}\nsecond line"
        with pytest.raises(ExecutionError) as exc:
            TextTemplateEngine().render(t, {})
        msg = str(exc.value)
        assert msg.startswith("error executing template {{ missing.field }}:")
        assert "second line" not in msg

    def test_function_error_wrapped(self) -> None:
        with pytest.raises(ExecutionError) as exc:
            TextTemplateEngine().render("{{ b64dec(v) }}", {"v": "***"})
        assert isinstance(exc.value.__cause__, ValueError)

    def test_missing_name_renders_empty_by_default(self) -> None:
        assert TextTemplateEngine().render("a{{ missing }}b", {}) == "ab"

    @patch("templating.engines.text.template_engine.settings")
    def test_strict_undefined(self, mock_settings: MagicMock) -> None:
        mock_settings.TEMPLATE_STRICT_UNDEFINED = True
        with pytest.raises(ExecutionError):
            TextTemplateEngine().render("a{{ missing }}b", {})


class TestTextTemplateEngineParseParameters:
    def test_vars(self) -> None:
        e = TextTemplateEngine()
        assert e.parse_parameters("{{ a }}") == ["a"]
        assert e.parse_parameters("{{ b }} and {{ a }}") == ["a", "b"]

    def test_functions_excluded(self) -> None:
        assert parse_parameters("{{ quote(name) }} {{ x | sha256 }}") == ["name", "x"]

    def test_loop(self) -> None:
        names = parse_parameters("{% for x in items %}{{ x }}{% endfor %}")
        assert names == ["items"]

    def test_syntax_error(self) -> None:
        with pytest.raises(CompilationError):
            parse_parameters("{% for %}")
