"""
Argument Binding Exception Classes

Typed exceptions raised while binding GraphQL field arguments to Python types.
Every binding error carries the argument path and the expected type so the
host can build a precise field error for the client.
"""

from typing import Annotated, Any, get_args, get_origin


def type_name(target: Any) -> str:
    """Return a readable name for a type or type hint."""
    if get_origin(target) is Annotated:
        return type_name(get_args(target)[0])
    if isinstance(target, type):
        return target.__qualname__
    return str(target).replace("typing.", "")


class BindingError(Exception):
    """Base exception for all argument binding errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg = f"{base_msg} (Context: {context_str})"
        return base_msg

    @property
    def path(self) -> str | None:
        """Argument path the error was raised for (e.g. ``books[1].name``)."""
        return self.context.get("path")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary the host can attach to a GraphQL error."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            **self.context,
        }


def _binding_context(
    path: str | None, expected_type: Any = None, value: Any = None
) -> dict[str, Any]:
    context: dict[str, Any] = {}
    if path:
        context["path"] = path
    if expected_type is not None:
        context["expected_type"] = type_name(expected_type)
    if value is not None:
        context["actual_type"] = type(value).__name__
    return context


class TypeMismatchError(BindingError):
    """Raised when the raw value's shape disagrees with the requested kind."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        expected_type: Any = None,
        value: Any = None,
    ) -> None:
        super().__init__(
            message, "TYPE_MISMATCH", _binding_context(path, expected_type, value)
        )


class UnsupportedConversionError(BindingError):
    """Raised when no conversion path exists from a raw scalar to the target."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        expected_type: Any = None,
        value: Any = None,
    ) -> None:
        super().__init__(
            message,
            "UNSUPPORTED_CONVERSION",
            _binding_context(path, expected_type, value),
        )

    def get_recovery_hint(self) -> str:
        """Provide a helpful hint for fixing the conversion error."""
        if "expected_type" in self.context and "actual_type" in self.context:
            source = self.context["actual_type"]
            target = self.context["expected_type"]
            return f"Register a converter from {source} to {target}"
        return "Register a converter for the target type"


class NumericOverflowError(BindingError):
    """Raised when a numeric value is out of range for the target type."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        expected_type: Any = None,
        value: Any = None,
    ) -> None:
        context = _binding_context(path, expected_type, value)
        if value is not None:
            context["value"] = str(value)
        super().__init__(message, "NUMERIC_OVERFLOW", context)


class MissingArgumentError(BindingError):
    """Raised when a required argument is absent from the argument map."""

    def __init__(self, message: str, argument_name: str | None = None) -> None:
        context = {}
        if argument_name:
            context["path"] = argument_name
        super().__init__(message, "MISSING_ARGUMENT", context)


class RegistryError(Exception):
    """Base exception for conversion registry misuse."""


class RegistryFrozenError(RegistryError):
    """Raised when a converter is registered after the registry was frozen."""


class ArgumentLoadError(Exception):
    """
    Raised by the I/O layer when an argument document cannot be read or parsed.

    Examples
    --------
    * File does not exist / bad extension
    * YAML or JSON syntax error
    * Top-level object is not a mapping
    """
