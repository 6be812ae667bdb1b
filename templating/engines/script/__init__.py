"""
Script engine (Python, RestrictedPython).

Exports: ScriptExecutor, compile_script, build_restricted_globals,
bind_environment, load_shared_library.
"""

from .executor import ScriptExecutor
from .sandbox import (
    bind_environment,
    build_restricted_globals,
    compile_script,
    load_shared_library,
)

__all__ = [
    "ScriptExecutor",
    "compile_script",
    "build_restricted_globals",
    "bind_environment",
    "load_shared_library",
]
