"""
Target descriptors.

A :class:`TargetDescriptor` is the declared shape a caller wants an argument
bound into. Descriptors are derived once from Python type hints by
:func:`describe_type` and cached, so the recursive binding algorithm never has
to inspect a class twice.

Supported hints
---------------
* scalars: ``str``, ``int``, ``float``, ``bool``, ``Decimal``, enums and any
  class without settable fields (bound through the conversion registry)
* composites: dataclasses, pydantic models and plain classes that declare
  annotated attributes and can be constructed without arguments
* sequences: ``list[T]``, ``tuple[T, ...]``, ``set[T]``, ``frozenset[T]`` and
  the ``collections.abc`` sequence types
* mappings: ``dict[str, T]`` / ``Mapping[str, T]``
* ``Literal[...]`` scalars restricted to the listed values
* ``Optional[T]`` and ``Annotated[T, ...]`` wrappers
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import inspect
import logging
import re
import threading
import types
import typing
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, ClassVar, Literal, Union, get_args, get_origin

from pydantic import BaseModel

from ..exceptions import type_name
from .numeric import NumericBounds

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Enumerations and markers
# ---------------------------------------------------------------------------


class TargetKind(str, Enum):
    """Structural kind of a bind target."""

    ANY = "any"
    SCALAR = "scalar"
    COMPOSITE = "composite"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class Construction(str, Enum):
    """How a composite instance is built from its bound fields."""

    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"
    ATTRIBUTES = "attributes"


@dataclass(frozen=True)
class Alias:
    """Argument-map key for a composite field: ``Annotated[int, Alias("authorId")]``."""

    key: str


_SCALAR_TYPES: frozenset[type] = frozenset(
    {
        str,
        int,
        float,
        bool,
        bytes,
        complex,
        Decimal,
        uuid.UUID,
        datetime.date,
        datetime.datetime,
        datetime.time,
        datetime.timedelta,
    }
)

_SEQUENCE_ORIGINS: dict[Any, type] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

_MAPPING_ORIGINS: frozenset[Any] = frozenset(
    {dict, collections.abc.Mapping, collections.abc.MutableMapping}
)

_CAMEL_RE = re.compile(r"_([a-z0-9])")


def to_camel_case(name: str) -> str:
    """Convert a snake_case attribute name to the camelCase GraphQL convention."""
    head = name[: len(name) - len(name.lstrip("_"))]
    return head + _CAMEL_RE.sub(lambda m: m.group(1).upper(), name.lstrip("_"))


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldDescriptor:
    """A settable field of a composite target."""

    name: str
    hint: Any
    alias: str | None = None
    has_default: bool = False

    @property
    def target(self) -> TargetDescriptor:
        """Descriptor of the field type, resolved lazily for recursive types."""
        return describe_type(self.hint)

    def lookup_key(self, camel_case: bool = False) -> str:
        """Key used to find this field's value in a nested argument map."""
        if self.alias:
            return self.alias
        return to_camel_case(self.name) if camel_case else self.name


@dataclass(frozen=True)
class TargetDescriptor:
    """Declared shape of a bind target."""

    hint: Any
    kind: TargetKind
    target_type: Any = None
    optional: bool = False
    element: TargetDescriptor | None = None
    container: type | None = None
    construction: Construction | None = None
    bounds: NumericBounds | None = None
    choices: tuple[Any, ...] | None = None

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        """Settable fields of a composite target (empty for other kinds)."""
        if self.kind is not TargetKind.COMPOSITE:
            return ()
        return _describe_fields(self.target_type, self.construction)

    def zero_value(self) -> Any:
        """Value bound when the argument is absent from the map."""
        if self.kind is TargetKind.SEQUENCE and self.container is not None:
            return self.container()
        if self.kind is TargetKind.MAPPING:
            return {}
        return None

    @property
    def display_name(self) -> str:
        return type_name(self.hint)


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def describe_type(hint: Any) -> TargetDescriptor:
    """
    Derive the :class:`TargetDescriptor` for a type hint.

    Args:
        hint: Any supported type hint, or an existing descriptor

    Returns:
        The (cached) descriptor

    Raises:
        TypeError: If the hint, or a field of a composite it reaches,
            describes a shape that cannot be bound, such as a union of
            several concrete types
    """
    if isinstance(hint, TargetDescriptor):
        return hint
    try:
        descriptor = _describe_cached(hint)
    except TypeError as e:
        if "unhashable" not in str(e):
            raise
        # unhashable metadata in Annotated[...]; derive without caching
        descriptor = _describe(hint)
    if descriptor.kind is TargetKind.COMPOSITE:
        _validate_fields(descriptor)
    return descriptor


@lru_cache(maxsize=1024)
def _describe_cached(hint: Any) -> TargetDescriptor:
    return _describe(hint)


# Composites whose field hints have all been described successfully.
_validated: set[type] = set()
_in_progress: set[type] = set()
_validation_lock = threading.RLock()


def _validate_fields(descriptor: TargetDescriptor) -> None:
    """Describe every field hint of a composite up front.

    Field descriptors stay lazy so recursive types resolve, but an
    unbindable field must fail when its owner is described, not halfway
    through a bind.
    """
    cls = descriptor.target_type
    if cls in _validated:
        return
    with _validation_lock:
        if cls in _validated or cls in _in_progress:
            return
        _in_progress.add(cls)
        try:
            for field in descriptor.fields:
                try:
                    describe_type(field.hint)
                except TypeError as e:
                    raise TypeError(
                        f"Field '{cls.__qualname__}.{field.name}': {e}"
                    ) from e
            _validated.add(cls)
        finally:
            _in_progress.discard(cls)


def _describe(hint: Any) -> TargetDescriptor:
    origin = get_origin(hint)

    if origin is Literal:
        choices = get_args(hint)
        value_types = {type(choice) for choice in choices}
        return TargetDescriptor(
            hint=hint,
            kind=TargetKind.SCALAR,
            target_type=value_types.pop() if len(value_types) == 1 else object,
            choices=choices,
        )

    if origin is Annotated:
        inner, *metadata = get_args(hint)
        descriptor = describe_type(inner)
        bounds = next((m for m in metadata if isinstance(m, NumericBounds)), None)
        if bounds is not None:
            if descriptor.target_type is not int:
                raise TypeError(
                    f"NumericBounds only apply to int targets, not {hint!r}"
                )
            descriptor = dataclasses.replace(descriptor, bounds=bounds)
        return dataclasses.replace(descriptor, hint=hint)

    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(hint) if a is not type(None)]
        if len(members) != 1:
            raise TypeError(
                f"Cannot bind to union {hint!r}; only Optional[T] is supported"
            )
        descriptor = describe_type(members[0])
        return dataclasses.replace(descriptor, hint=hint, optional=True)

    if hint is Any or hint is object:
        return TargetDescriptor(hint=hint, kind=TargetKind.ANY, target_type=object)

    if origin in _SEQUENCE_ORIGINS or hint in _SEQUENCE_ORIGINS:
        return _describe_sequence(hint, origin or hint)

    if origin in _MAPPING_ORIGINS or hint in _MAPPING_ORIGINS:
        return _describe_mapping(hint)

    if origin is not None:
        raise TypeError(f"Unsupported generic target type: {hint!r}")

    if not isinstance(hint, type):
        raise TypeError(f"Target type must be a class or type hint, got {hint!r}")

    construction = _composite_construction(hint)
    if construction is None:
        return TargetDescriptor(hint=hint, kind=TargetKind.SCALAR, target_type=hint)

    logger.debug(f"Described composite '{hint.__qualname__}' ({construction.value})")
    return TargetDescriptor(
        hint=hint,
        kind=TargetKind.COMPOSITE,
        target_type=hint,
        construction=construction,
    )


def _describe_sequence(hint: Any, origin: Any) -> TargetDescriptor:
    args = get_args(hint)
    container = _SEQUENCE_ORIGINS[origin]
    if origin is tuple and args:
        if len(args) != 2 or args[1] is not Ellipsis:
            raise TypeError(
                f"Fixed-length tuple targets are not supported: {hint!r}; "
                "use tuple[T, ...]"
            )
        args = args[:1]
    element = describe_type(args[0]) if args else describe_type(Any)
    return TargetDescriptor(
        hint=hint,
        kind=TargetKind.SEQUENCE,
        target_type=container,
        element=element,
        container=container,
    )


def _describe_mapping(hint: Any) -> TargetDescriptor:
    args = get_args(hint)
    if args and args[0] not in (str, Any):
        raise TypeError(f"Mapping targets must be keyed by str: {hint!r}")
    value = describe_type(args[1]) if args else describe_type(Any)
    return TargetDescriptor(
        hint=hint,
        kind=TargetKind.MAPPING,
        target_type=dict,
        element=value,
        container=dict,
    )


def _composite_construction(cls: type) -> Construction | None:
    """Pick the construction strategy, or None when ``cls`` is a scalar."""
    if cls in _SCALAR_TYPES or issubclass(cls, Enum):
        return None
    if dataclasses.is_dataclass(cls):
        if any(f.init for f in dataclasses.fields(cls)):
            return Construction.DATACLASS
        return None
    if issubclass(cls, BaseModel):
        return Construction.PYDANTIC if cls.model_fields else None
    if _attribute_hints(cls) and _constructible_without_arguments(cls):
        return Construction.ATTRIBUTES
    return None


def _constructible_without_arguments(cls: type) -> bool:
    if cls.__init__ is object.__init__ and cls.__new__ is object.__new__:
        return True
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    return all(
        p.default is not inspect.Parameter.empty
        or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


def _attribute_hints(cls: type) -> dict[str, Any]:
    """Public, non-ClassVar annotated attributes of a plain class."""
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        logger.warning(f"Cannot resolve annotations of '{cls.__qualname__}': {e}")
        return {}
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_")
        and hint is not ClassVar
        and get_origin(hint) is not ClassVar
    }


def _alias_from(hint: Any) -> str | None:
    if get_origin(hint) is Annotated:
        for meta in get_args(hint)[1:]:
            if isinstance(meta, Alias):
                return meta.key
    return None


@lru_cache(maxsize=512)
def _describe_fields(
    cls: type, construction: Construction | None
) -> tuple[FieldDescriptor, ...]:
    if construction is Construction.DATACLASS:
        hints = typing.get_type_hints(cls, include_extras=True)
        return tuple(
            FieldDescriptor(
                name=f.name,
                hint=hints.get(f.name, Any),
                alias=f.metadata.get("alias") or _alias_from(hints.get(f.name)),
                has_default=(
                    f.default is not dataclasses.MISSING
                    or f.default_factory is not dataclasses.MISSING
                ),
            )
            for f in dataclasses.fields(cls)
            if f.init
        )

    if construction is Construction.PYDANTIC:
        fields = []
        for name, info in cls.model_fields.items():
            hint = info.annotation if info.annotation is not None else Any
            if info.metadata:
                hint = Annotated[(hint, *info.metadata)]
            fields.append(
                FieldDescriptor(
                    name=name,
                    hint=hint,
                    alias=info.alias,
                    has_default=not info.is_required(),
                )
            )
        return tuple(fields)

    if construction is Construction.ATTRIBUTES:
        return tuple(
            FieldDescriptor(
                name=name,
                hint=hint,
                alias=_alias_from(hint),
                has_default=any(name in vars(base) for base in cls.__mro__),
            )
            for name, hint in _attribute_hints(cls).items()
        )

    return ()
