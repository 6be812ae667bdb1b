"""
Unified template renderer.

Dispatches to the script (RestrictedPython), text template (Jinja2) or
expression (Jinja2 expression) engine by inspecting the TemplateSpec in the
fixed order script -> template -> expression. First populated body wins;
an empty spec renders "".
"""

import logging
from collections.abc import Mapping
from typing import Any

from templating.core.config import settings
from templating.engines.errors import ExecutionError, SpecError, TemplatingError
from templating.engines.expression import ExpressionEngine
from templating.engines.script import ScriptExecutor
from templating.engines.spec import EXPRESSION, SCRIPT, TEMPLATE, TemplateSpec
from templating.engines.text import TextTemplateEngine

_log = logging.getLogger(__name__)


def _load_spec(spec: Mapping[str, Any]) -> TemplateSpec:
    try:
        return TemplateSpec.model_validate(dict(spec))
    except (TypeError, ValueError) as e:  # pydantic ValidationError is a ValueError
        raise SpecError(f"invalid template spec: {e}") from e


class TemplateRenderer:
    """
    render(environment, spec, *, timeout=None) -> str

    Errors from the selected engine propagate unchanged (no retry, no
    fallback to another engine).
    """

    def render(
        self,
        environment: Mapping[str, Any] | None,
        spec: TemplateSpec | Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> str:
        _env = environment or {}
        _spec = spec if isinstance(spec, TemplateSpec) else _load_spec(spec)

        populated = _spec.populated_engines()
        if not populated:
            return ""
        engine = populated[0]
        if len(populated) > 1:
            if settings.STRICT_TEMPLATE_SPEC:
                raise SpecError(
                    f"template spec sets more than one engine: {', '.join(populated)}"
                )
            _log.warning(
                "Template spec sets %s; using %s and ignoring the rest",
                ", ".join(populated),
                engine,
            )
        _log.debug("Rendering with %s engine", engine)

        body = _spec.body(engine)
        try:
            if engine == SCRIPT:
                return ScriptExecutor().execute(body, _env, timeout=timeout)
            if engine == TEMPLATE:
                return TextTemplateEngine().render(body, _env, timeout=timeout)
            if engine == EXPRESSION:
                return ExpressionEngine().evaluate(body, _env, timeout=timeout)
        except TemplatingError:
            raise
        except Exception as e:
            _log.error("%s engine failed: %s", engine, e, exc_info=True)
            raise ExecutionError(f"{engine} render failed: {e}", engine=engine) from e

        raise SpecError(f"Unsupported engine: {engine}")


def render(
    environment: Mapping[str, Any] | None,
    spec: TemplateSpec | Mapping[str, Any],
    *,
    timeout: float | None = None,
) -> str:
    """Render *spec* against *environment* with a fresh TemplateRenderer."""
    return TemplateRenderer().render(environment, spec, timeout=timeout)
