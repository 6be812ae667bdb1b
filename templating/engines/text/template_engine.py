"""
Text template engine with Jinja2.

Renders a template against the *marshaled* environment (JSON-shaped data
only, see ``templating.engines.marshal``) with TEMPLATE_FUNCS available as
filters and globals. Output is stripped of surrounding whitespace so
templates can use line breaks freely.

Templates are compiled on every call; nothing is cached between renders.
"""

from collections.abc import Mapping
from typing import Any

from jinja2 import StrictUndefined, Template, TemplateSyntaxError, Undefined, meta
from jinja2.sandbox import SandboxedEnvironment

from templating.core.config import settings
from templating.engines.deadline import run_with_deadline
from templating.engines.errors import CompilationError, ExecutionError, TemplatingError
from templating.engines.marshal import marshal_environment
from templating.engines.text.functions import TEMPLATE_FUNCS

ENGINE = "template"

_TEXT_ENVS: dict[bool, SandboxedEnvironment] = {}


def _get_text_env(strict: bool = False) -> SandboxedEnvironment:
    """Return the shared sandboxed Jinja2 Environment (functions registered)."""
    env = _TEXT_ENVS.get(strict)
    if env is None:
        undefined: type[Undefined] = StrictUndefined if strict else Undefined
        env = SandboxedEnvironment(autoescape=False, undefined=undefined)
        env.filters.update(TEMPLATE_FUNCS)
        env.globals.update(TEMPLATE_FUNCS)
        _TEXT_ENVS[strict] = env
    return env


def first_line(source: str) -> str:
    return source.split("\n")[0]


class TextTemplateEngine:
    """Renders Jinja2 text templates and parses parameter names."""

    def compile(self, template: str) -> Template:
        env = _get_text_env(settings.TEMPLATE_STRICT_UNDEFINED)
        try:
            return env.from_string(template)
        except TemplateSyntaxError as e:
            raise CompilationError(
                f"error parsing template {first_line(template)}: {e}", engine=ENGINE
            ) from e

    def render(
        self,
        template: str,
        environment: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> str:
        """Render *template* against the marshaled *environment*; return stripped output."""
        tpl = self.compile(template)
        data = marshal_environment(environment)
        try:
            out = run_with_deadline(tpl.render, data, timeout=timeout, engine=ENGINE)
        except TemplatingError:
            raise
        except Exception as e:
            raise ExecutionError(
                f"error executing template {first_line(template)}: {e}", engine=ENGINE
            ) from e
        return out.strip()

    def parse_parameters(self, template: str) -> list[str]:
        """Extract undeclared variable names, excluding the function library."""
        env = _get_text_env()
        try:
            ast = env.parse(template)
        except TemplateSyntaxError as e:
            raise CompilationError(
                f"error parsing template {first_line(template)}: {e}", engine=ENGINE
            ) from e
        names = meta.find_undeclared_variables(ast) - set(TEMPLATE_FUNCS)
        return sorted(names)


def parse_parameters(template: str) -> list[str]:
    return TextTemplateEngine().parse_parameters(template)
