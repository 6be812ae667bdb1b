"""
Errors raised by the rendering engines.

Every error carries the ``engine`` that produced it ("script", "template",
"expression" or None for dispatcher-level failures) and chains the original
exception with ``raise ... from``.
"""


class TemplatingError(ValueError):
    """Base class for all render failures."""

    def __init__(self, message: str, *, engine: str | None = None) -> None:
        super().__init__(message)
        self.engine = engine


class BindingError(TemplatingError):
    """An environment entry could not be bound into the script runtime."""

    def __init__(self, key: object, reason: str) -> None:
        super().__init__(f"error setting {key}: {reason}", engine="script")
        self.key = key


class CompilationError(TemplatingError):
    """A script, template or expression body failed to parse or compile."""


class ExecutionError(TemplatingError):
    """The selected engine failed while running the body."""


class RenderTimeoutError(ExecutionError):
    """Raised when a render exceeds its deadline."""

    pass


class TypeContractError(TemplatingError):
    """A script produced something other than a string."""

    def __init__(self, type_name: str) -> None:
        super().__init__(
            f"failed to cast output to string; it is of type {type_name}",
            engine="script",
        )
        self.type_name = type_name


class MarshalError(TemplatingError):
    """The environment could not be converted to its structural form."""


class SharedLibraryError(TemplatingError):
    """A shared script library could not be read or executed."""


class SpecError(TemplatingError):
    """The template specification is ambiguous (strict mode only)."""
