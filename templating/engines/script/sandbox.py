"""
RestrictedPython sandbox for the script engine.

Scripts see the safe builtins, json and the datetime types, plus the
caller's environment bound as globals. open, exec, eval, __import__,
compile and friends are not reachable.

``result`` is reserved: it receives the trailing expression and is the
fallback output for scripts that end in a statement.
"""

import ast
import inspect
import json
import keyword
import logging
import operator
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any

from RestrictedPython import compile_restricted
from RestrictedPython.Eval import default_guarded_getitem, default_guarded_getiter
from RestrictedPython.Guards import (
    full_write_guard,
    guarded_iter_unpack_sequence,
    guarded_unpack_sequence,
    safe_builtins,
    safer_getattr,
)

from templating.engines.errors import BindingError, SharedLibraryError

_log = logging.getLogger(__name__)

RESULT_NAME = "result"

# RestrictedPython rewrites ``x += y`` into ``x = _inplacevar_("+=", x, y)``.
_INPLACE_OPERATORS = {
    "+=": operator.iadd,
    "-=": operator.isub,
    "*=": operator.imul,
    "/=": operator.itruediv,
    "//=": operator.ifloordiv,
    "%=": operator.imod,
    "**=": operator.ipow,
    "<<=": operator.ilshift,
    ">>=": operator.irshift,
    "&=": operator.iand,
    "|=": operator.ior,
    "^=": operator.ixor,
    "@=": operator.imatmul,
}


def _inplacevar(op: str, x: Any, y: Any) -> Any:
    fn = _INPLACE_OPERATORS.get(op)
    if fn is None:
        raise SyntaxError(f"unsupported in-place operator {op}")
    return fn(x, y)


# Hooks called by the bytecode compile_restricted emits.
_GUARDS: dict[str, Any] = {
    "_getattr_": safer_getattr,
    "_getitem_": default_guarded_getitem,
    "_getiter_": default_guarded_getiter,
    "_inplacevar_": _inplacevar,
    "_iter_unpack_sequence_": guarded_iter_unpack_sequence,
    "_unpack_sequence_": guarded_unpack_sequence,
    "_write_": full_write_guard,
}

# Helpers every script gets on top of the safe builtins.
_HELPERS: dict[str, Any] = {
    "json": json,
    "datetime": datetime,
    "date": date,
    "time": time,
    "timedelta": timedelta,
    "dict": dict,
    "list": list,
    "set": set,
    "min": min,
    "max": max,
    "sum": sum,
    "enumerate": enumerate,
}

# Names the runtime owns; the environment may not rebind them.
RESERVED_NAMES = frozenset({RESULT_NAME})


def _capture_last_expression(tree: ast.Module) -> ast.Module:
    """Rewrite a trailing expression statement into ``result = <expr>``."""
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        last = tree.body[-1]
        assign = ast.Assign(
            targets=[ast.Name(id=RESULT_NAME, ctx=ast.Store())],
            value=last.value,
        )
        tree.body[-1] = ast.copy_location(assign, last)
        ast.fix_missing_locations(tree)
    return tree


def compile_script(script: str, filename: str = "<script>") -> Any:
    """
    Compile script with RestrictedPython. Raises SyntaxError on failure.

    The value of a trailing expression statement is stored in ``result``.
    Returns a code object suitable for exec(bytecode, globals).
    """
    tree = _capture_last_expression(ast.parse(script, filename, "exec"))
    code = compile_restricted(tree, filename, "exec")
    if code is None:
        raise SyntaxError("RestrictedPython: compile failed")
    return code


def build_restricted_globals(context_dict: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Fresh script globals: safe builtins, guards, helpers, then *context_dict*."""
    g: dict[str, Any] = {"__builtins__": dict(safe_builtins), "__name__": "script"}
    g.update(_GUARDS)
    g.update(_HELPERS)
    g.update(context_dict or {})
    return g


def _binding_problem(key: Any, value: Any) -> str | None:
    if not isinstance(key, str):
        return f"key must be a string, got {type(key).__name__}"
    if not key.isidentifier():
        return "key is not a valid identifier"
    if keyword.iskeyword(key):
        return "key is a reserved keyword"
    if key.startswith("_"):
        return "names starting with '_' are not allowed"
    if key in RESERVED_NAMES:
        return f"'{key}' is reserved for the script output"
    if inspect.ismodule(value):
        return "modules cannot be bound"
    return None


def bind_environment(g: dict[str, Any], environment: Mapping[str, Any]) -> None:
    """
    Bind each environment entry as a global in *g*.

    Raises BindingError on the first entry that cannot be bound; entries
    after it are not bound.
    """
    for key, value in environment.items():
        problem = _binding_problem(key, value)
        if problem is not None:
            raise BindingError(key, problem)
        g[key] = value


def load_shared_library(g: dict[str, Any], source: str) -> None:
    """
    Read the script file at *source* and run it in *g* so its top-level
    definitions are available to the script that runs next.
    """
    source = source.strip()
    try:
        data = Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise SharedLibraryError(
            f"failed to read shared library {source}: {e}", engine="script"
        ) from e
    _log.debug("Loaded %s:\n%s", source, data)

    try:
        code = compile_script(data, filename=source)
        exec(code, g)  # noqa: S102 - restricted environment
    except Exception as e:
        raise SharedLibraryError(
            f"failed to run shared library {source}: {e}", engine="script"
        ) from e
    # A trailing expression in a library is not the render's result.
    g.pop(RESULT_NAME, None)
