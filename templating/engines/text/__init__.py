"""
Text template engine (Jinja2).

Exports: TextTemplateEngine, parse_parameters, TEMPLATE_FUNCS.
"""

from templating.engines.text.functions import TEMPLATE_FUNCS
from templating.engines.text.template_engine import TextTemplateEngine, parse_parameters

__all__ = [
    "TextTemplateEngine",
    "parse_parameters",
    "TEMPLATE_FUNCS",
]
