"""Conversion registry for scalar argument types the binder cannot build itself."""

import datetime
import logging
import uuid
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from ..exceptions import RegistryFrozenError, UnsupportedConversionError, type_name

logger = logging.getLogger(__name__)

Converter = Callable[[Any], Any]
ConversionKey = tuple[type, type]


class ConversionRegistry:
    """
    Registry of converters keyed by (source shape, target type).

    Converters are registered once during application setup. After
    :meth:`freeze` the registry is read-only, so any number of binding
    calls can consult it concurrently without coordination.
    """

    def __init__(self):
        """Initialize an empty, writable registry."""
        self._converters: dict[ConversionKey, Converter] = {}
        self._frozen = False
        self._logger = logger.getChild(self.__class__.__name__)

    def register(
        self, source_shape: type, target_type: type, converter: Converter
    ) -> None:
        """
        Register a converter from a raw value shape to a target type.

        Args:
            source_shape: Type of the raw value (e.g. ``str``)
            target_type: Type the converter produces
            converter: Callable taking the raw value and returning the target

        Raises:
            ValueError: If a type or the converter is invalid
            RegistryFrozenError: If the registry has been frozen
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register {type_name(source_shape)} -> "
                f"{type_name(target_type)}: registry is frozen"
            )

        if not isinstance(source_shape, type) or not isinstance(target_type, type):
            raise ValueError("Source shape and target type must be classes")

        if not callable(converter):
            raise ValueError("Converter must be callable")

        key = (source_shape, target_type)
        if key in self._converters:
            self._logger.warning(
                f"Overwriting converter for '{type_name(source_shape)}' -> "
                f"'{type_name(target_type)}'"
            )

        self._converters[key] = converter
        self._logger.info(
            f"Registered converter '{getattr(converter, '__qualname__', converter)}' "
            f"for '{type_name(source_shape)}' -> '{type_name(target_type)}'"
        )

    def freeze(self) -> None:
        """Make the registry read-only."""
        if not self._frozen:
            self._converters = MappingProxyType(dict(self._converters))  # type: ignore[assignment]
            self._frozen = True
            self._logger.info(f"Froze registry with {len(self)} converters")

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def find_converter(self, source_type: type, target_type: type) -> Converter | None:
        """
        Look up the converter for a raw value type and target type.

        The source type's MRO is searched most specific first, so a
        converter registered for ``int`` is not picked up for ``bool``
        when a ``bool`` converter exists.

        Returns:
            The converter, or None when no path exists
        """
        for source in source_type.__mro__:
            converter = self._converters.get((source, target_type))
            if converter is not None:
                return converter
        return None

    def can_convert(self, source_type: type, target_type: type) -> bool:
        """Check whether a conversion path exists."""
        return self.find_converter(source_type, target_type) is not None

    def convert(self, value: Any, target_type: type, path: str | None = None) -> Any:
        """
        Convert a raw value to the target type.

        Args:
            value: Raw argument value
            target_type: Requested type
            path: Argument path, used in error context

        Returns:
            The converted value

        Raises:
            UnsupportedConversionError: If no converter is registered or the
                converter rejects the value
        """
        converter = self.find_converter(type(value), target_type)
        if converter is None:
            raise UnsupportedConversionError(
                f"No converter registered from {type(value).__name__} "
                f"to {type_name(target_type)}",
                path=path,
                expected_type=target_type,
                value=value,
            )

        try:
            return converter(value)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise UnsupportedConversionError(
                f"Converter rejected value for {type_name(target_type)}: {e}",
                path=path,
                expected_type=target_type,
                value=value,
            ) from e

    def get_registered_pairs(self) -> list[ConversionKey]:
        """
        Get all registered (source shape, target type) pairs.

        Returns:
            Pairs sorted by source and target name
        """
        return sorted(
            self._converters.keys(),
            key=lambda k: (type_name(k[0]), type_name(k[1])),
        )

    def clear(self) -> None:
        """Remove all converters from a writable registry."""
        if self._frozen:
            raise RegistryFrozenError("Cannot clear a frozen registry")
        self._converters.clear()
        self._logger.info("Cleared all converter registrations")

    def __len__(self) -> int:
        """Return the number of registered converters."""
        return len(self._converters)

    def __contains__(self, key: ConversionKey) -> bool:
        """Check if a (source shape, target type) pair is registered."""
        return key in self._converters


# --------------------------------------------------------------------------- #
# Built-in converters
# --------------------------------------------------------------------------- #


def _str_to_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"true", "1", "yes", "on"}:
        return True
    if normalized in {"false", "0", "no", "off"}:
        return False
    raise ValueError(f"'{value}' is not a boolean")


def _str_to_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except InvalidOperation as e:
        raise ValueError(f"'{value}' is not a decimal number") from e


def _number_to_str(value: Any) -> str:
    return str(value)


def register_builtin_converters(registry: ConversionRegistry) -> None:
    """
    Register the string and number converters every application expects.

    Mirrors a default formatting conversion service: text representations
    of numbers, booleans, UUIDs and ISO-8601 dates and times.
    """
    builtins: list[tuple[type, type, Converter]] = [
        (str, int, lambda v: int(v.strip())),
        (str, float, lambda v: float(v.strip())),
        (str, Decimal, _str_to_decimal),
        (str, bool, _str_to_bool),
        (str, uuid.UUID, uuid.UUID),
        (str, datetime.date, datetime.date.fromisoformat),
        (str, datetime.datetime, datetime.datetime.fromisoformat),
        (str, datetime.time, datetime.time.fromisoformat),
        (int, str, _number_to_str),
        (float, str, _number_to_str),
    ]
    for source, target, converter in builtins:
        if (source, target) not in registry:
            registry.register(source, target, converter)


# Global conversion registry instance
_default_registry = ConversionRegistry()


def get_default_registry() -> ConversionRegistry:
    """Get the process-wide default conversion registry."""
    return _default_registry
