"""
Command-line interface for binding GraphQL argument documents to Python handlers.

This module lets developers check how an argument map will be bound to the
``Argument`` parameters of a handler without running a GraphQL server.
"""

import argparse
import importlib
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

from argbind.core.conversion_registry import (
    ConversionRegistry,
    register_builtin_converters,
)
from argbind.core.binder import ArgumentBinder
from argbind.core.numeric import NumericBounds
from argbind.core.options import BindingOptions
from argbind.exceptions import (
    ArgumentLoadError,
    BindingError,
    MissingArgumentError,
    NumericOverflowError,
    TypeMismatchError,
    UnsupportedConversionError,
)
from argbind.io import ArgumentFileLoader, dump_yaml
from argbind.resolver import ArgumentResolver, describe_parameters


@dataclass
class TargetSpec:
    """Specification of an importable callable in MODULE:QUALNAME format."""

    module_name: str
    qualname: str


def parse_target_argument(target_arg: str) -> TargetSpec:
    """
    Parse a target argument in MODULE:QUALNAME format.

    Args:
        target_arg: Target argument string (e.g., 'app.books:BookController.add_book')

    Returns:
        TargetSpec with parsed module and qualified name

    Raises:
        ValueError: If the argument format is invalid
    """
    if ":" not in target_arg:
        raise ValueError(
            f"Invalid target format: '{target_arg}'. "
            "Expected format: MODULE:QUALNAME (e.g., 'app.books:add_book')"
        )

    module_name, qualname = target_arg.split(":", 1)

    if not module_name.strip():
        raise ValueError(
            f"Empty module in target: '{target_arg}'. "
            "Expected format: MODULE:QUALNAME (e.g., 'app.books:add_book')"
        )

    if not qualname.strip():
        raise ValueError(
            f"Empty name in target: '{target_arg}'. "
            "Expected format: MODULE:QUALNAME (e.g., 'app.books:add_book')"
        )

    return TargetSpec(module_name=module_name.strip(), qualname=qualname.strip())


def load_callable(target_arg: str) -> Callable[..., Any]:
    """
    Import the callable named by a MODULE:QUALNAME argument.

    Raises:
        ValueError: If the module or attribute cannot be found or is not callable
    """
    spec = parse_target_argument(target_arg)
    try:
        obj: Any = importlib.import_module(spec.module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{spec.module_name}': {e}") from e

    for part in spec.qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ValueError(
                f"'{spec.module_name}' has no attribute '{spec.qualname}'"
            ) from e

    if not callable(obj):
        raise ValueError(f"Target '{target_arg}' is not callable")
    return obj


def configure_logging(debug: bool = False, verbose: bool = False) -> None:
    """Configure application logging.

    Args:
        debug: Enable debug-level logging if True.
        verbose: Enable info-level logging from the binder if True.
    """
    if debug:
        level = logging.DEBUG
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif verbose:
        level = logging.INFO
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    else:
        level = logging.WARNING
        format_str = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,  # Override existing configuration
    )


def build_options(args: argparse.Namespace) -> BindingOptions:
    """Build binding options from command line flags."""
    bounds = NumericBounds.signed(args.int_bits) if args.int_bits else None
    return BindingOptions(
        camel_case_keys=args.camel_case,
        ignore_unknown_keys=not args.strict_keys,
        default_int_bounds=bounds,
    )


def build_registry(setup_args: list[str] | None) -> ConversionRegistry:
    """
    Create a frozen conversion registry.

    Built-in converters are registered first, then every setup callable
    (MODULE:QUALNAME, called with the registry) may add its own.
    """
    registry = ConversionRegistry()
    register_builtin_converters(registry)
    for setup_arg in setup_args or []:
        setup = load_callable(setup_arg)
        setup(registry)
    registry.freeze()
    return registry


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse and validate command line arguments.

    Returns:
        Parsed command line arguments.
    """
    parser = argparse.ArgumentParser(
        prog="argbind",
        description="Bind GraphQL field arguments to typed Python handler parameters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Bind the arguments in args.json to the parameters of add_book
  python -m argbind.main bind app.books:add_book args.json

  # GraphQL camelCase keys onto snake_case attributes, 32-bit Int range
  python -m argbind.main bind app.books:add_book args.yaml --camel-case --int-bits 32

  # Register application converters before binding
  python -m argbind.main bind app.books:by_keyword args.json --setup app.converters:register

  # Show which parameters are bound and their target types
  python -m argbind.main describe app.books:add_book
        """,
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging for detailed output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    bind_parser = subparsers.add_parser("bind", help="Bind an argument document")
    bind_parser.add_argument("target", metavar="MODULE:QUALNAME")
    bind_parser.add_argument(
        "arguments_file", type=Path, help="JSON or YAML file holding the argument map"
    )
    bind_parser.add_argument(
        "--camel-case",
        action="store_true",
        help="Look up composite fields by their camelCase names",
    )
    bind_parser.add_argument(
        "--strict-keys",
        action="store_true",
        help="Reject input object keys that match no declared field",
    )
    bind_parser.add_argument(
        "--int-bits",
        type=int,
        choices=[0, 32, 64],
        default=64,
        help="Signed range enforced on int targets (0 disables the check)",
    )
    bind_parser.add_argument(
        "--exact-decimals",
        action="store_true",
        help="Decode JSON fractions as Decimal instead of float",
    )
    bind_parser.add_argument(
        "--setup",
        action="append",
        metavar="MODULE:QUALNAME",
        help="Callable registering converters, called with the registry (repeatable)",
    )

    describe_parser = subparsers.add_parser(
        "describe", help="Show the argument parameters of a handler"
    )
    describe_parser.add_argument("target", metavar="MODULE:QUALNAME")

    return parser.parse_args(argv)


def run_bind(args: argparse.Namespace) -> str:
    """Bind the argument document to the target handler and render the result."""
    logger = logging.getLogger(__name__)

    handler = load_callable(args.target)
    arguments = ArgumentFileLoader.load(
        args.arguments_file, exact_decimals=args.exact_decimals
    )
    resolver = ArgumentResolver(
        ArgumentBinder(build_registry(args.setup), build_options(args))
    )

    logger.info(f"Binding {len(arguments)} argument(s) to '{args.target}'")
    bound = resolver.resolve_arguments(handler, arguments)
    return dump_yaml(bound)


def run_describe(args: argparse.Namespace) -> str:
    """Render the argument parameter descriptors of the target handler."""
    handler = load_callable(args.target)
    described = {
        parameter.parameter_name: {
            "argument": parameter.argument_name(),
            "type": parameter.target.display_name,
            "kind": parameter.target.kind.value,
            "required": parameter.marker.required,
            "fields": [
                f"{field.lookup_key()}: {field.target.display_name}"
                for field in parameter.target.fields
            ],
        }
        for parameter in describe_parameters(handler)
    }
    return dump_yaml(described)


def main(argv: list[str] | None = None) -> NoReturn:
    """Entry point: run the selected command and exit with its status code.

    Raises:
        SystemExit: Always exits with appropriate code (0 for success, >0 for errors).
    """
    args = parse_arguments(argv)
    configure_logging(args.debug, args.verbose)
    logger = logging.getLogger(__name__)

    try:
        if args.command == "bind":
            output = run_bind(args)
        else:
            output = run_describe(args)
        sys.stdout.write(output)
        sys.exit(0)

    except (ValueError, ArgumentLoadError) as e:
        logger.error(f"Input error: {e}")
        sys.exit(1)
    except TypeMismatchError as e:
        logger.error(f"Type mismatch: {e}")
        sys.exit(2)
    except UnsupportedConversionError as e:
        logger.error(f"Unsupported conversion: {e}")
        logger.info(f"Suggestion: {e.get_recovery_hint()}")
        sys.exit(3)
    except NumericOverflowError as e:
        logger.error(f"Numeric overflow: {e}")
        sys.exit(4)
    except MissingArgumentError as e:
        logger.error(f"Missing argument: {e}")
        sys.exit(5)
    except BindingError as e:
        logger.error(f"Binding error: {e}")
        sys.exit(6)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            logger.exception("Full traceback:")
        sys.exit(9)


if __name__ == "__main__":
    main()
