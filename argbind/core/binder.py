"""
Argument binder.

Binds one entry of a decoded GraphQL argument map to a declared Python type,
recursing through nested input objects, lists and maps and falling back to the
conversion registry for scalar types it cannot construct itself.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import ValidationError

from ..exceptions import TypeMismatchError, UnsupportedConversionError, type_name
from . import numeric
from .conversion_registry import ConversionRegistry, get_default_registry
from .descriptors import (
    Construction,
    FieldDescriptor,
    TargetDescriptor,
    TargetKind,
    describe_type,
)
from .options import BindingOptions

logger = logging.getLogger(__name__)


class ArgumentBinder:
    """
    Bind loosely typed argument values to declared target types.

    The binder holds no per-call state: the conversion registry and options
    it is constructed with are read-only while binding, and the argument
    map is never modified. Failures raise a :class:`BindingError` subclass
    and abort the whole call; no partially populated object is returned.
    """

    def __init__(
        self,
        registry: ConversionRegistry | None = None,
        options: BindingOptions | None = None,
    ) -> None:
        """
        Initialize the binder.

        Args:
            registry: Conversion registry consulted for scalar leaves
                (defaults to the process-wide registry)
            options: Binding configuration (defaults to ``BindingOptions()``)
        """
        self.registry = registry if registry is not None else get_default_registry()
        self.options = options or BindingOptions()
        self._logger = logger.getChild(self.__class__.__name__)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def bind(
        self, argument_name: str, target_type: Any, arguments: Mapping[str, Any]
    ) -> Any:
        """
        Bind the named argument to the target type.

        Args:
            argument_name: Top-level key into the argument map
            target_type: Type hint or :class:`TargetDescriptor`
            arguments: Decoded argument map for the current field

        Returns:
            The bound value, or the target's zero value when the argument
            is absent (None, or an empty container for list/map targets)

        Raises:
            ValueError: If argument_name is empty
            BindingError: If the raw value cannot be bound
        """
        if not argument_name:
            raise ValueError("Argument name cannot be empty")

        descriptor = describe_type(target_type)

        if argument_name not in arguments:
            self._logger.debug(
                f"Argument '{argument_name}' absent, using zero value "
                f"for {descriptor.display_name}"
            )
            return descriptor.zero_value()

        return self.bind_value(arguments[argument_name], descriptor, argument_name)

    def bind_value(self, value: Any, target_type: Any, path: str) -> Any:
        """
        Bind a raw value (already extracted from its map) to a target.

        Args:
            value: Raw value
            target_type: Type hint or :class:`TargetDescriptor`
            path: Argument path used in error context (e.g. ``books[0]``)
        """
        descriptor = describe_type(target_type)

        if value is None:
            return None

        kind = descriptor.kind
        if kind is TargetKind.ANY:
            return value
        if kind is TargetKind.SCALAR:
            return self._bind_scalar(value, descriptor, path)
        if kind is TargetKind.COMPOSITE:
            return self._bind_composite(value, descriptor, path)
        if kind is TargetKind.SEQUENCE:
            return self._bind_sequence(value, descriptor, path)
        if kind is TargetKind.MAPPING:
            return self._bind_mapping(value, descriptor, path)

        raise TypeError(f"Unhandled target kind: {kind}")

    # ------------------------------------------------------------------ #
    # Scalars
    # ------------------------------------------------------------------ #

    def _bind_scalar(self, value: Any, descriptor: TargetDescriptor, path: str) -> Any:
        target = descriptor.target_type

        if descriptor.choices is not None:
            return self._literal_choice(value, descriptor, path)

        native = self._native_scalar(value, descriptor, path)
        if native is not numeric.NOT_NATIVE:
            return native

        if isinstance(value, (Mapping, list, tuple)) and not self.registry.can_convert(
            type(value), target
        ):
            raise TypeMismatchError(
                f"Expected a scalar for {type_name(target)}, "
                f"got {type(value).__name__}",
                path=path,
                expected_type=target,
                value=value,
            )

        self._logger.debug(
            f"Converting '{path}' from {type(value).__name__} to {type_name(target)}"
        )
        converted = self.registry.convert(value, target, path=path)
        if target is int:
            narrowed = numeric.to_int(converted, self._int_bounds(descriptor), path)
            if narrowed is numeric.NOT_NATIVE:
                raise UnsupportedConversionError(
                    f"Converter returned {type(converted).__name__} for int",
                    path=path,
                    expected_type=target,
                    value=value,
                )
            return narrowed
        return converted

    def _native_scalar(self, value: Any, descriptor: TargetDescriptor, path: str) -> Any:
        """Apply the numeric rule table and identity rules, or NOT_NATIVE."""
        target = descriptor.target_type

        if target is int:
            return numeric.to_int(value, self._int_bounds(descriptor), path)
        if target is float:
            return numeric.to_float(value, path)
        if target is Decimal:
            return numeric.to_decimal(value, path)
        if target is bool:
            return value if isinstance(value, bool) else numeric.NOT_NATIVE
        if isinstance(target, type) and issubclass(target, Enum):
            return self._enum_member(value, target)
        if isinstance(value, target):
            return value
        return numeric.NOT_NATIVE

    def _int_bounds(self, descriptor: TargetDescriptor) -> numeric.NumericBounds | None:
        if descriptor.bounds is not None:
            return descriptor.bounds
        return self.options.default_int_bounds

    def _literal_choice(
        self, value: Any, descriptor: TargetDescriptor, path: str
    ) -> Any:
        for choice in descriptor.choices or ():
            if isinstance(choice, Enum):
                if self._enum_member(value, type(choice)) is choice:
                    return choice
            elif type(value) is type(choice) and value == choice:
                return choice
        raise TypeMismatchError(
            f"Value {value!r} is not one of {descriptor.display_name}",
            path=path,
            expected_type=descriptor.hint,
            value=value,
        )

    @staticmethod
    def _enum_member(value: Any, enum_type: type[Enum]) -> Any:
        if isinstance(value, enum_type):
            return value
        for member in enum_type:
            if member.value == value and type(member.value) is type(value):
                return member
        if isinstance(value, str) and value in enum_type.__members__:
            return enum_type[value]
        return numeric.NOT_NATIVE

    # ------------------------------------------------------------------ #
    # Composites
    # ------------------------------------------------------------------ #

    def _bind_composite(
        self, value: Any, descriptor: TargetDescriptor, path: str
    ) -> Any:
        cls = descriptor.target_type
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping) and self.registry.can_convert(
            type(value), cls
        ):
            return self.registry.convert(value, cls, path=path)
        if not isinstance(value, Mapping):
            raise TypeMismatchError(
                f"Expected an input object for {type_name(cls)}, "
                f"got {type(value).__name__}",
                path=path,
                expected_type=cls,
                value=value,
            )

        fields = descriptor.fields
        camel_case = self.options.camel_case_keys
        if not self.options.ignore_unknown_keys:
            known = {f.lookup_key(camel_case) for f in fields}
            unknown = sorted(str(k) for k in value if k not in known)
            if unknown:
                raise TypeMismatchError(
                    f"Unknown field(s) for {type_name(cls)}: {', '.join(unknown)}",
                    path=path,
                    expected_type=cls,
                    value=value,
                )

        bound: dict[str, Any] = {}
        for field in fields:
            key = field.lookup_key(camel_case)
            if key in value:
                bound[field.name] = self.bind_value(
                    value[key], field.target, f"{path}.{key}"
                )
            elif not field.has_default:
                bound[field.name] = field.target.zero_value()

        return self._construct(descriptor, fields, bound, path)

    def _construct(
        self,
        descriptor: TargetDescriptor,
        fields: tuple[FieldDescriptor, ...],
        bound: dict[str, Any],
        path: str,
    ) -> Any:
        cls = descriptor.target_type
        construction = descriptor.construction

        if construction is Construction.DATACLASS:
            try:
                return cls(**bound)
            except (ValueError, TypeError) as e:
                raise TypeMismatchError(
                    f"Cannot construct {type_name(cls)}: {e}",
                    path=path,
                    expected_type=cls,
                ) from e

        if construction is Construction.PYDANTIC:
            data = {(f.alias or f.name): bound[f.name] for f in fields if f.name in bound}
            try:
                return cls.model_validate(data)
            except ValidationError as e:
                raise TypeMismatchError(
                    f"Invalid input object for {type_name(cls)}: "
                    f"{e.error_count()} validation error(s): "
                    + "; ".join(
                        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                        for err in e.errors()
                    ),
                    path=path,
                    expected_type=cls,
                ) from e

        instance = cls()
        for field in fields:
            if field.name in bound:
                setattr(instance, field.name, bound[field.name])
            elif field.name not in getattr(instance, "__dict__", {}) and isinstance(
                getattr(cls, field.name, None), (list, dict, set)
            ):
                # class-level container defaults must not be shared
                setattr(instance, field.name, copy.copy(getattr(cls, field.name)))
        return instance

    # ------------------------------------------------------------------ #
    # Sequences and mappings
    # ------------------------------------------------------------------ #

    def _bind_sequence(self, value: Any, descriptor: TargetDescriptor, path: str) -> Any:
        if not isinstance(value, (list, tuple)):
            raise TypeMismatchError(
                f"Expected a list for {descriptor.display_name}, "
                f"got {type(value).__name__}",
                path=path,
                expected_type=descriptor.hint,
                value=value,
            )

        element = descriptor.element
        items = [
            self.bind_value(item, element, f"{path}[{index}]")
            for index, item in enumerate(value)
        ]
        container = descriptor.container or list
        return items if container is list else container(items)

    def _bind_mapping(self, value: Any, descriptor: TargetDescriptor, path: str) -> Any:
        if not isinstance(value, Mapping):
            raise TypeMismatchError(
                f"Expected a map for {descriptor.display_name}, "
                f"got {type(value).__name__}",
                path=path,
                expected_type=descriptor.hint,
                value=value,
            )

        element = descriptor.element
        return {
            key: self.bind_value(item, element, f"{path}.{key}")
            for key, item in value.items()
        }
