"""
ScriptExecutor: execute(script, environment) -> str.

Every call builds its own restricted globals (no runtime is shared between
renders), loads shared libraries, binds the environment as globals and
runs the body as one top-level script. The value of the trailing
expression (or the ``result`` global) must be a str.

Optional: SCRIPT_EXTRA_MODULES (comma-separated) exposes whitelisted modules in script globals.
Optional: SCRIPT_SHARED_LIBRARIES (comma-separated paths) is loaded before every script.
"""

import importlib
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from templating.core.config import settings
from templating.engines.deadline import run_with_deadline
from templating.engines.errors import (
    CompilationError,
    ExecutionError,
    TemplatingError,
    TypeContractError,
)

from .sandbox import (
    RESULT_NAME,
    bind_environment,
    build_restricted_globals,
    compile_script,
    load_shared_library,
)

_log = logging.getLogger(__name__)

ENGINE = "script"

# Only allow top-level module names (e.g. math, re), no submodules
_SAFE_MODULE_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")


def _split_setting(raw: str | None) -> list[str]:
    return [s.strip() for s in (raw or "").split(",") if s.strip()]


def _inject_extra_modules(g: dict[str, Any]) -> None:
    """Inject whitelisted extra modules into script globals. Scripts cannot import."""
    for name in _split_setting(settings.SCRIPT_EXTRA_MODULES):
        if not _SAFE_MODULE_NAME_RE.match(name):
            _log.warning("Ignoring invalid SCRIPT_EXTRA_MODULES entry %r", name)
            continue
        try:
            g[name] = importlib.import_module(name)
        except ImportError as e:
            _log.warning("SCRIPT_EXTRA_MODULES: cannot import %s: %s", name, e)


def _type_name(value: Any) -> str:
    return type(value).__name__


class ScriptExecutor:
    """
    Run a Python script in a RestrictedPython sandbox with the environment bound as globals.
    """

    def execute(
        self,
        script: str,
        environment: Mapping[str, Any],
        *,
        libraries: Sequence[str] | None = None,
        timeout: float | None = None,
    ) -> str:
        """
        Compile *script*, bind *environment*, run it and return its string result.

        Raises CompilationError, SharedLibraryError, BindingError,
        ExecutionError (RenderTimeoutError on deadline) or TypeContractError.
        """
        try:
            code = compile_script(script)
        except SyntaxError as e:
            raise CompilationError(f"failed to compile script: {e}", engine=ENGINE) from e

        g = build_restricted_globals()
        _inject_extra_modules(g)
        paths = list(libraries) if libraries is not None else _split_setting(settings.SCRIPT_SHARED_LIBRARIES)
        for path in paths:
            load_shared_library(g, path)
        bind_environment(g, environment)

        try:
            run_with_deadline(exec, code, g, timeout=timeout, engine=ENGINE)
        except TemplatingError:
            raise
        except Exception as e:
            raise ExecutionError(f"failed to run script: {e}", engine=ENGINE) from e

        out = g.get(RESULT_NAME)
        if not isinstance(out, str):
            raise TypeContractError(_type_name(out))
        return out
