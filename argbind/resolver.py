"""
Annotation-driven argument resolution for GraphQL handler functions.

Handler parameters opt in to argument binding with the :class:`Argument`
marker::

    def add_book(book_input: Annotated[BookInput, Argument("bookInput")]) -> Book:
        ...

:func:`describe_parameters` derives the parameter descriptors of a handler once
and caches them; :class:`ArgumentResolver` binds the argument map of each call
against those descriptors.
"""

from __future__ import annotations

import functools
import inspect
import logging
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from .core.binder import ArgumentBinder
from .core.descriptors import TargetDescriptor, describe_type, to_camel_case
from .core.protocols import MethodArgumentResolver
from .exceptions import MissingArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Argument:
    """
    Marks a handler parameter as bound from a GraphQL field argument.

    Attributes:
        name: Argument name in the argument map; defaults to the
            parameter name
        required: Raise :class:`MissingArgumentError` instead of binding
            the zero value when the argument is absent
    """

    name: str | None = None
    required: bool = False


@dataclass(frozen=True)
class ParameterDescriptor:
    """A handler parameter that is bound from the argument map."""

    parameter_name: str
    marker: Argument
    target: TargetDescriptor
    default: Any = inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    def argument_name(self, camel_case: bool = False) -> str:
        """Key of this parameter's value in the argument map."""
        if self.marker.name:
            return self.marker.name
        return to_camel_case(self.parameter_name) if camel_case else self.parameter_name


def find_argument_marker(hint: Any) -> Argument | None:
    """Return the :class:`Argument` marker of an ``Annotated`` hint, if any."""
    if get_origin(hint) in (Union, types.UnionType):
        # Optional[Annotated[T, Argument()]]
        return next(
            (m for m in map(find_argument_marker, get_args(hint)) if m is not None),
            None,
        )
    if get_origin(hint) is not Annotated:
        return None
    for meta in get_args(hint)[1:]:
        if isinstance(meta, Argument):
            return meta
        if meta is Argument:
            return Argument()
    return None


@functools.lru_cache(maxsize=256)
def describe_parameters(func: Callable[..., Any]) -> tuple[ParameterDescriptor, ...]:
    """
    Derive the descriptors of every ``Argument`` parameter of a handler.

    Args:
        func: Handler function or bound method

    Returns:
        Parameter descriptors in signature order

    Raises:
        TypeError: If a parameter's declared type cannot be bound
    """
    signature = inspect.signature(func)
    hints = typing.get_type_hints(func, include_extras=True)

    descriptors = []
    for name, parameter in signature.parameters.items():
        hint = hints.get(name, parameter.annotation)
        marker = find_argument_marker(hint)
        if marker is None:
            continue
        if parameter.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            raise TypeError(
                f"Argument marker is not supported on variadic parameter '{name}'"
            )
        descriptors.append(
            ParameterDescriptor(
                parameter_name=name,
                marker=marker,
                target=describe_type(hint),
                default=parameter.default,
            )
        )

    logger.debug(
        f"Described {len(descriptors)} argument parameter(s) of "
        f"'{getattr(func, '__qualname__', func)}'"
    )
    return tuple(descriptors)


class ArgumentResolver:
    """
    Resolves handler parameters marked with :class:`Argument`.

    Parameters without the marker are left to other resolvers of the host.
    """

    def __init__(self, binder: ArgumentBinder | None = None) -> None:
        self.binder = binder or ArgumentBinder()
        self._logger = logger.getChild(self.__class__.__name__)

    def supports_parameter(
        self, parameter: inspect.Parameter, hint: Any = None
    ) -> bool:
        """
        Check whether a parameter is bound from the argument map.

        Args:
            parameter: Parameter of the handler signature
            hint: Resolved type hint; defaults to ``parameter.annotation``

        Returns:
            True if the parameter carries an ``Argument`` marker
        """
        annotation = hint if hint is not None else parameter.annotation
        return find_argument_marker(annotation) is not None

    def resolve_argument(
        self, parameter: ParameterDescriptor, arguments: Mapping[str, Any]
    ) -> Any:
        """
        Bind one handler parameter from the argument map.

        Raises:
            MissingArgumentError: If a required argument is absent
            BindingError: If the value cannot be bound
        """
        name = parameter.argument_name(self.binder.options.camel_case_keys)

        if name not in arguments:
            if parameter.marker.required:
                raise MissingArgumentError(
                    f"Required argument '{name}' was not provided",
                    argument_name=name,
                )
            if parameter.has_default:
                return parameter.default

        return self.binder.bind(name, parameter.target, arguments)

    def resolve_arguments(
        self, func: Callable[..., Any], arguments: Mapping[str, Any]
    ) -> dict[str, Any]:
        """
        Bind every ``Argument`` parameter of a handler.

        Args:
            func: Handler function or bound method
            arguments: Decoded argument map of the current field

        Returns:
            Keyword arguments keyed by parameter name
        """
        resolved = {
            parameter.parameter_name: self.resolve_argument(parameter, arguments)
            for parameter in describe_parameters(func)
        }
        self._logger.debug(
            f"Resolved {len(resolved)} argument(s) for "
            f"'{getattr(func, '__qualname__', func)}'"
        )
        return resolved


_default_resolver: ArgumentResolver | None = None


def get_default_resolver() -> ArgumentResolver:
    """Get the resolver bound to the default conversion registry."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = ArgumentResolver()
    return _default_resolver


def bind_arguments(
    func: Callable[..., Any] | None = None,
    *,
    resolver: MethodArgumentResolver | None = None,
) -> Any:
    """
    Decorate a handler so it can serve as a GraphQL field resolver.

    The wrapper accepts the engine's ``(source, info, **raw_arguments)``
    call. Positional arguments are passed through; ``Argument`` parameters
    are bound from ``raw_arguments``; other keyword arguments are passed
    through only when the handler declares a parameter of that name.
    """

    def decorate(handler: Callable[..., Any]) -> Callable[..., Any]:
        parameters = describe_parameters(handler)
        bound_names = {p.parameter_name for p in parameters}
        passthrough_names = {
            name
            for name in inspect.signature(handler).parameters
            if name not in bound_names
        }

        def _call_arguments(raw_arguments: dict[str, Any]) -> dict[str, Any]:
            active = resolver or get_default_resolver()
            kwargs = active.resolve_arguments(handler, raw_arguments)
            for name, value in raw_arguments.items():
                if name in passthrough_names:
                    kwargs[name] = value
            return kwargs

        if inspect.iscoroutinefunction(handler):

            @functools.wraps(handler)
            async def async_wrapper(*args: Any, **raw_arguments: Any) -> Any:
                return await handler(*args, **_call_arguments(raw_arguments))

            return async_wrapper

        @functools.wraps(handler)
        def wrapper(*args: Any, **raw_arguments: Any) -> Any:
            return handler(*args, **_call_arguments(raw_arguments))

        return wrapper

    if func is not None:
        return decorate(func)
    return decorate
