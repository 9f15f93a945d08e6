"""
Package facade. A single import gives users everything they need:

    from argbind import Argument, ArgumentBinder, ConversionRegistry

Design
------
* ``ArgumentBinder`` binds one argument of a decoded argument map.
* ``ArgumentResolver`` binds every ``Argument`` parameter of a handler.
* ``ConversionRegistry`` holds the converters for opaque scalar types.
"""

from __future__ import annotations

from .core.binder import ArgumentBinder
from .core.conversion_registry import (
    ConversionRegistry,
    get_default_registry,
    register_builtin_converters,
)
from .core.descriptors import Alias, TargetDescriptor, TargetKind, describe_type
from .core.numeric import INT32, INT64, UINT32, NumericBounds
from .core.options import BindingOptions
from .exceptions import (
    BindingError,
    MissingArgumentError,
    NumericOverflowError,
    RegistryFrozenError,
    TypeMismatchError,
    UnsupportedConversionError,
)
from .resolver import (
    Argument,
    ArgumentResolver,
    bind_arguments,
    describe_parameters,
)

__all__ = [
    "Alias",
    "Argument",
    "ArgumentBinder",
    "ArgumentResolver",
    "BindingError",
    "BindingOptions",
    "ConversionRegistry",
    "INT32",
    "INT64",
    "MissingArgumentError",
    "NumericBounds",
    "NumericOverflowError",
    "RegistryFrozenError",
    "TargetDescriptor",
    "TargetKind",
    "TypeMismatchError",
    "UINT32",
    "UnsupportedConversionError",
    "bind_arguments",
    "describe_parameters",
    "describe_type",
    "get_default_registry",
    "register_builtin_converters",
]
