# SPDX-License-Identifier: MIT
"""Command-line interface for ccbatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ccbatch.core.errors import CcbatchError
from ccbatch.core.executor import DEFAULT_JOBS, DEFAULT_MAKE_COMMAND, BatchExecutor
from ccbatch.core.options import (
    CompileOptions,
    DefineEntry,
    LinkSubsystem,
    OptimizationSpec,
    Rtti,
)
from ccbatch.toolchains.gcc import COMPILERS, GccCompiler, detect_identifier, get_compiler

# Set up logging
logger = logging.getLogger("ccbatch")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging; --debug also shows which module logged."""
    level = logging.WARNING
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    fmt = "%(levelname)s: %(name)s: %(message)s" if debug else "%(levelname)s: %(message)s"
    logging.basicConfig(level=level, format=fmt)


def parse_define(text: str) -> DefineEntry:
    """Parse NAME or NAME=VALUE into a DefineEntry."""
    name, sep, value = text.partition("=")
    return DefineEntry(name, value if sep else None)


def options_from_args(args: argparse.Namespace) -> CompileOptions:
    """Build CompileOptions from parsed arguments."""
    return CompileOptions(
        debug=args.debug_info,
        multithreaded=args.multithreaded,
        exceptions=args.exceptions,
        subsystem=LinkSubsystem(args.subsystem),
        rtti=Rtti.from_bool(args.rtti),
        optimization=OptimizationSpec.parse(args.optimize),
    )


def compiler_from_args(args: argparse.Namespace) -> GccCompiler:
    """Select the compiler variant and apply the identifier override."""
    from ccbatch import get_var

    name = args.compiler or get_var("CCBATCH_COMPILER", "gcc") or "gcc"
    compiler = get_compiler(name)
    if args.identifier:
        compiler = compiler.with_identifier(args.identifier)
    elif args.detect_identifier:
        detected = detect_identifier(compiler.command)
        if detected:
            logger.info("Detected %s target: %s", compiler.command, detected)
            compiler = compiler.with_identifier(detected)
        else:
            logger.warning("Could not detect target of %s", compiler.command)
    return compiler


def compile_args_from_args(
    compiler: GccCompiler, args: argparse.Namespace
) -> list[str]:
    includes: list[str | Path] = list(args.include)
    if args.env_include:
        includes.extend(compiler.environment_include_path())
    return compiler.compile_args(
        options_from_args(args),
        includes=includes,
        defines=[parse_define(d) for d in args.define],
        undefines=args.undefine,
        warning_level=args.warnings,
        extra_flags=args.flag,
    )


def cmd_flags(args: argparse.Namespace) -> int:
    """Print the compiler flags implied by the options."""
    setup_logging(args.verbose, args.debug)

    try:
        compiler = compiler_from_args(args)
    except KeyError as e:
        logger.error("%s", e.args[0])
        return 1

    print(" ".join(compile_args_from_args(compiler, args)))
    return 0


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile a batch of sources through make."""
    setup_logging(args.verbose, args.debug)

    try:
        compiler = compiler_from_args(args)
    except KeyError as e:
        logger.error("%s", e.args[0])
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    executor = BatchExecutor(compiler, make_command=args.make, jobs=args.jobs)

    def report(sources: list[str]) -> None:
        logger.info("Compiled batch of %d sources", len(sources))

    try:
        result = executor.execute(
            output_dir,
            args.sources,
            compile_args_from_args(compiler, args),
            args.end_arg,
            relentless=args.relentless,
            progress=report,
        )
    except CcbatchError as e:
        logger.error("%s", e)
        return 1

    if result.tolerated_failure:
        return 0
    return result.exit_code


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments common to all commands."""
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def add_option_args(parser: argparse.ArgumentParser) -> None:
    """Add compile option arguments."""
    parser.add_argument(
        "--compiler",
        choices=sorted(COMPILERS),
        help="Compiler variant (default: $CCBATCH_COMPILER or gcc)",
    )
    parser.add_argument("--identifier", help="Override the compiler identifier")
    parser.add_argument(
        "--detect-identifier",
        action="store_true",
        help="Ask the compiler for its target with -dumpmachine",
    )
    parser.add_argument(
        "-g",
        "--debug-info",
        action="store_true",
        help="Generate debug information (disables optimization)",
    )
    parser.add_argument(
        "-O",
        "--optimize",
        metavar="LEVEL",
        help="none, size, minimal, speed, full, aggressive, extreme or unsafe",
    )
    parser.add_argument(
        "--subsystem",
        choices=[s.value for s in LinkSubsystem],
        default=LinkSubsystem.OTHER.value,
        help="Link subsystem (MinGW only)",
    )
    parser.add_argument(
        "--rtti",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable or disable RTTI (default: compiler default)",
    )
    parser.add_argument(
        "--multithreaded", action="store_true", help="Multithreaded runtime"
    )
    parser.add_argument(
        "--exceptions", action="store_true", help="C++ exception support"
    )
    parser.add_argument(
        "-W", "--warnings", type=int, metavar="LEVEL", help="Warning level 0-5"
    )
    parser.add_argument(
        "-I", "--include", action="append", default=[], help="Include directory"
    )
    parser.add_argument(
        "--env-include",
        action="store_true",
        help="Also use directories from the INCLUDE environment variable",
    )
    parser.add_argument(
        "-D", "--define", action="append", default=[], help="NAME or NAME=VALUE"
    )
    parser.add_argument(
        "-U", "--undefine", action="append", default=[], help="Undefine NAME"
    )
    parser.add_argument(
        "--flag",
        action="append",
        default=[],
        help="Extra flag placed before the source",
    )


def main() -> int:
    """Main entry point for the ccbatch CLI."""
    parser = argparse.ArgumentParser(
        prog="ccbatch",
        description="GCC flag synthesis and batch compilation through make.",
        epilog="Run 'ccbatch <command> --help' for command-specific help.",
    )
    from ccbatch import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ccbatch flags
    flags_parser = subparsers.add_parser(
        "flags", help="Print the compiler flags for a set of options"
    )
    add_common_args(flags_parser)
    add_option_args(flags_parser)
    flags_parser.set_defaults(func=cmd_flags)

    # ccbatch compile
    compile_parser = subparsers.add_parser(
        "compile", help="Compile sources in one make batch"
    )
    add_common_args(compile_parser)
    add_option_args(compile_parser)
    compile_parser.add_argument(
        "-o", "--output-dir", required=True, help="Directory for Makefile and objects"
    )
    compile_parser.add_argument(
        "--end-arg",
        action="append",
        default=[],
        help="Extra argument placed after the source",
    )
    compile_parser.add_argument(
        "--relentless",
        action="store_true",
        help="Do not fail when the batch fails",
    )
    compile_parser.add_argument(
        "--make", default=DEFAULT_MAKE_COMMAND, help="make executable"
    )
    compile_parser.add_argument(
        "-j", "--jobs", type=int, default=DEFAULT_JOBS, help="Parallel jobs"
    )
    compile_parser.add_argument("sources", nargs="+", help="Source files")
    compile_parser.set_defaults(func=cmd_compile)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
