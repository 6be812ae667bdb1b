"""
templating: render a value from an environment with one of three engines
(script, text template, expression).

    from templating import render
    render({"a": 2, "b": 3}, {"expr": "a + b"})  # -> "5"
"""

from templating.engines import (
    BindingError,
    CompilationError,
    ExecutionError,
    MarshalError,
    RenderTimeoutError,
    SharedLibraryError,
    SpecError,
    TemplateRenderer,
    TemplateSpec,
    TemplatingError,
    TypeContractError,
    render,
)

__all__ = [
    "render",
    "TemplateRenderer",
    "TemplateSpec",
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
