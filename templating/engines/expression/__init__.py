"""
Expression engine (Jinja2 expressions).

Exports: ExpressionEngine, ExpressionOptions, make_expression_options, make_expression_env.
"""

from templating.engines.expression.expression_engine import ExpressionEngine
from templating.engines.expression.options import (
    ExpressionOptions,
    make_expression_env,
    make_expression_options,
)

__all__ = [
    "ExpressionEngine",
    "ExpressionOptions",
    "make_expression_options",
    "make_expression_env",
]
