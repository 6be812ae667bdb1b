"""
Expression engine: a single Jinja2 expression evaluated in a sandbox.

No statements or loops; the result (number, bool, string, ...) is converted
with str(). This is the only engine that stringifies implicitly.
"""

from collections.abc import Mapping
from typing import Any

from jinja2 import TemplateSyntaxError, meta
from jinja2.environment import TemplateExpression
from jinja2.sandbox import SandboxedEnvironment

from templating.engines.deadline import run_with_deadline
from templating.engines.errors import CompilationError, ExecutionError, TemplatingError
from templating.engines.expression.options import (
    ExpressionOptions,
    make_expression_env,
    make_expression_options,
)

ENGINE = "expression"


def _build_env(options: ExpressionOptions) -> SandboxedEnvironment:
    env = SandboxedEnvironment(autoescape=False, undefined=options.undefined)
    env.filters.update(options.functions)
    return env


class ExpressionEngine:
    """
    Compiles and evaluates expressions like ``a + b`` or ``name | upper``.

    The result is formatted with Python's str(): booleans render as
    ``True``/``False`` and None as ``None`` (not lower-case ``true``/``false``).
    """

    def compile(self, expression: str, options: ExpressionOptions) -> TemplateExpression:
        """
        Compile *expression*. Raises CompilationError on syntax errors or
        references to identifiers not declared in *options*.
        """
        env = _build_env(options)
        try:
            compiled = env.compile_expression(expression, undefined_to_none=False)
            names = meta.find_undeclared_variables(env.parse("{{ " + expression + " }}"))
        except TemplateSyntaxError as e:
            raise CompilationError(f"failed to compile expression: {e}", engine=ENGINE) from e
        unknown = sorted(names - options.declared - set(env.globals))
        if unknown:
            raise CompilationError(
                f"failed to compile expression: unknown name(s) {', '.join(unknown)}",
                engine=ENGINE,
            )
        return compiled

    def evaluate(
        self,
        expression: str,
        environment: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> str:
        program = self.compile(expression, make_expression_options(environment))
        view = make_expression_env(environment)
        try:
            output = run_with_deadline(program, view, timeout=timeout, engine=ENGINE)
            return str(output)
        except TemplatingError:
            raise
        except Exception as e:
            raise ExecutionError(f"failed to evaluate expression: {e}", engine=ENGINE) from e
