"""
Engines: Script (RestrictedPython), Text template (Jinja2), Expression (Jinja2)
and the TemplateRenderer that dispatches between them.
"""

from templating.engines.errors import (
    BindingError,
    CompilationError,
    ExecutionError,
    MarshalError,
    RenderTimeoutError,
    SharedLibraryError,
    SpecError,
    TemplatingError,
    TypeContractError,
)
from templating.engines.executor import TemplateRenderer, render
from templating.engines.expression import ExpressionEngine
from templating.engines.marshal import marshal_environment
from templating.engines.script import ScriptExecutor
from templating.engines.spec import TemplateSpec
from templating.engines.text import TEMPLATE_FUNCS, TextTemplateEngine, parse_parameters

__all__ = [
    "TemplateRenderer",
    "TemplateSpec",
    "render",
    "ScriptExecutor",
    "TextTemplateEngine",
    "ExpressionEngine",
    "marshal_environment",
    "parse_parameters",
    "TEMPLATE_FUNCS",
    "TemplatingError",
    "BindingError",
    "CompilationError",
    "ExecutionError",
    "RenderTimeoutError",
    "TypeContractError",
    "MarshalError",
    "SharedLibraryError",
    "SpecError",
]
