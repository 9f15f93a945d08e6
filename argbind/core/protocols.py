import inspect
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ValueBinder(Protocol):
    """Defines the contract for binding one argument of an argument map."""

    def bind(
        self, argument_name: str, target_type: Any, arguments: Mapping[str, Any]
    ) -> Any:
        """
        Binds the named argument to the declared target type.

        Args:
            argument_name: Top-level key into the argument map.
            target_type: Declared type hint or target descriptor.
            arguments: Decoded argument map of the current field.

        Returns:
            The bound value, or the target's zero value if absent.
        """
        ...


@runtime_checkable
class MethodArgumentResolver(Protocol):
    """Defines the contract for resolving a handler parameter from arguments."""

    def supports_parameter(
        self, parameter: inspect.Parameter, hint: Any = None
    ) -> bool:
        """
        Checks whether this resolver can supply the given parameter.

        Args:
            parameter: Parameter of the handler signature.
            hint: Resolved type hint of the parameter (with extras).

        Returns:
            True if the resolver handles the parameter, False otherwise.
        """
        ...

    def resolve_arguments(
        self, func: Callable[..., Any], arguments: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Resolves every supported parameter of ``func`` into keyword arguments."""
        ...
