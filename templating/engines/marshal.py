"""
Environment marshaler: arbitrary mapping -> JSON-shaped tree.

Text templates only see structural data (dict, list, str, int, float, bool,
None), so the environment is normalised and then round-tripped through
``json`` before rendering. The conversion is lossy: values with no
structural form (callables, modules, classes, generators) are dropped
silently rather than failing the render.
"""

import base64
import dataclasses
import inspect
import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from templating.engines.errors import MarshalError

# Sentinel for values that have no structural representation.
_DROP = object()


def _is_unsupported(value: Any) -> bool:
    return (
        callable(value)
        or inspect.ismodule(value)
        or inspect.isgenerator(value)
        or inspect.iscoroutine(value)
    )


def _convert_key(key: Any) -> str | None:
    """Stringify keys the way ``json`` does; other key types are dropped."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (int, float)):
        return str(key)
    return None


def _convert(value: Any, active: set[int]) -> Any:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Enum):
        return _convert(value.value, active)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    # Classes are callable; this also drops functions, lambdas and bound methods.
    if _is_unsupported(value):
        return _DROP

    marker = id(value)
    if marker in active:
        raise MarshalError("circular reference in environment", engine="template")
    active.add(marker)
    try:
        if isinstance(value, BaseModel):
            return _convert(_public(dict(value)), active)
        if isinstance(value, Mapping):
            out: dict[str, Any] = {}
            for k, v in value.items():
                key = _convert_key(k)
                if key is None:
                    continue
                converted = _convert(v, active)
                if converted is not _DROP:
                    out[key] = converted
            return out
        if isinstance(value, (list, tuple, set, frozenset)):
            items = [_convert(v, active) for v in value]
            return [v for v in items if v is not _DROP]
        if dataclasses.is_dataclass(value):
            fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
            return _convert(_public(fields), active)
        if hasattr(value, "__dict__"):
            return _convert(_public(vars(value)), active)
    finally:
        active.discard(marker)
    return _DROP


def _public(attrs: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in attrs.items() if not k.startswith("_")}


def marshal_environment(environment: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Convert *environment* to a fresh ``dict[str, Any]`` of JSON-compatible values.

    Pydantic models are walked field by field, so unsupported fields drop
    like any other value. Raises MarshalError on reference cycles, nesting
    deeper than the recursion limit, or values ``json`` refuses (NaN/Infinity).
    """
    try:
        tree = _convert(dict(environment or {}), set())
        data = json.dumps(tree, allow_nan=False)
        unstructured = json.loads(data)
    except MarshalError:
        raise
    except RecursionError as e:
        raise MarshalError("environment is nested too deeply to marshal", engine="template") from e
    except (TypeError, ValueError) as e:
        raise MarshalError(f"failed to marshal environment: {e}", engine="template") from e
    if not isinstance(unstructured, dict):
        raise MarshalError("environment did not marshal to an object", engine="template")
    return unstructured
