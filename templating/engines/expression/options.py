"""
Compilation options and evaluation view for the expression engine.

``make_expression_options`` declares which identifiers an expression may
reference (environment keys plus the function library);
``make_expression_env`` builds the mapping the compiled expression runs
against. The raw environment is used as-is, not the marshaled tree.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from jinja2 import StrictUndefined, Undefined

from templating.engines.text.functions import TEMPLATE_FUNCS


@dataclass(frozen=True)
class ExpressionOptions:
    declared: frozenset[str]
    functions: Mapping[str, Any] = field(default_factory=lambda: dict(TEMPLATE_FUNCS))
    undefined: type[Undefined] = StrictUndefined


def make_expression_options(environment: Mapping[str, Any]) -> ExpressionOptions:
    names = {k for k in environment if isinstance(k, str)}
    return ExpressionOptions(declared=frozenset(names | set(TEMPLATE_FUNCS)))


def make_expression_env(environment: Mapping[str, Any]) -> dict[str, Any]:
    """Function library overlaid by the environment (environment keys win)."""
    view: dict[str, Any] = dict(TEMPLATE_FUNCS)
    view.update((k, v) for k, v in environment.items() if isinstance(k, str))
    return view
