"""
Function library for text templates and expressions.

Every function is registered both as a Jinja2 filter (``{{ name | quote }}``)
and as a global (``{{ quote(name) }}``). None-tolerant: None input behaves
like an empty value.
"""

import base64
import binascii
import hashlib
import json
import re
from typing import Any

_BYTE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_WORD_SEP_RE = re.compile(r"[\s\-_.]+")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def to_json(value: Any, indent: int | None = None) -> str:
    """Serialize to JSON; non-JSON values fall back to str()."""
    return json.dumps(value, default=str, indent=indent, sort_keys=indent is not None)


def from_json(value: Any) -> Any:
    """Parse a JSON string. Empty/None -> None."""
    s = _text(value).strip()
    if not s:
        return None
    return json.loads(s)


def b64enc(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raw = _text(value).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def b64dec(value: Any) -> str:
    """Decode base64 to UTF-8 text. Invalid input raises ValueError."""
    try:
        return base64.b64decode(_text(value), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"b64dec: invalid input: {e}") from e


def sha256(value: Any) -> str:
    return hashlib.sha256(_text(value).encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


def trim_prefix(value: Any, prefix: str) -> str:
    return _text(value).removeprefix(prefix)


def trim_suffix(value: Any, suffix: str) -> str:
    return _text(value).removesuffix(suffix)


def split(value: Any, sep: str | None = None) -> list[str]:
    """Split on *sep* (whitespace when None). Empty/None -> []."""
    s = _text(value)
    if not s:
        return []
    return s.split(sep)


def quote(value: Any) -> str:
    """Double-quote, escaping backslashes and double quotes."""
    s = _text(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{s}"'


def squote(value: Any) -> str:
    return "'" + _text(value).replace("'", "\\'") + "'"


def _words(value: Any) -> list[str]:
    s = _CAMEL_BOUNDARY_RE.sub(" ", _text(value))
    return [w.lower() for w in _WORD_SEP_RE.split(s) if w]


def snake_case(value: Any) -> str:
    """``HelloWorld-foo`` -> ``hello_world_foo``."""
    return "_".join(_words(value))


def kebab_case(value: Any) -> str:
    """``HelloWorld_foo`` -> ``hello-world-foo``."""
    return "-".join(_words(value))


def default_if_empty(value: Any, fallback: Any) -> Any:
    """Return *fallback* when value is None, "" or an empty collection."""
    if value is None or value == "" or value == [] or value == {}:
        return fallback
    return value


# ---------------------------------------------------------------------------
# Humanize
# ---------------------------------------------------------------------------


def humanize_bytes(value: Any) -> str:
    """1536 -> '1.5KiB'. Non-numeric input raises ValueError."""
    size = float(value or 0)
    if abs(size) < 1024:
        return f"{int(size)}B"
    for unit in _BYTE_UNITS[1:-1]:
        size /= 1024
        if abs(size) < 1024:
            return f"{size:.1f}{unit}"
    return f"{size / 1024:.1f}{_BYTE_UNITS[-1]}"


def humanize_duration(value: Any) -> str:
    """Seconds -> compact duration, e.g. 3725 -> '1h2m5s'."""
    total = int(float(value or 0))
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")
    return sign + "".join(parts)


# Collection of all functions to register in Jinja2 environments
TEMPLATE_FUNCS: dict[str, Any] = {
    "to_json": to_json,
    "from_json": from_json,
    "b64enc": b64enc,
    "b64dec": b64dec,
    "sha256": sha256,
    "trim_prefix": trim_prefix,
    "trim_suffix": trim_suffix,
    "split": split,
    "quote": quote,
    "squote": squote,
    "snake_case": snake_case,
    "kebab_case": kebab_case,
    "default_if_empty": default_if_empty,
    "humanize_bytes": humanize_bytes,
    "humanize_duration": humanize_duration,
}
