"""Core binding machinery: descriptors, numeric rules, converters and the binder."""

from .binder import ArgumentBinder
from .conversion_registry import ConversionRegistry
from .descriptors import TargetDescriptor, describe_type
from .options import BindingOptions

__all__ = [
    "ArgumentBinder",
    "BindingOptions",
    "ConversionRegistry",
    "TargetDescriptor",
    "describe_type",
]
