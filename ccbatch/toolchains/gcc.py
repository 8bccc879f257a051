# SPDX-License-Identifier: MIT
"""GCC-compatible compiler variants.

Translates abstract compile options into GCC command-line tokens and maps
source files to the object files a batch produces. Variants:
- GCC C compiler (gcc)
- GCC C++ compiler (g++)
- MinGW-w64 cross compiler (x86_64-w64-mingw32-gcc)
- libtool-wrapped gcc (objects use the .fo suffix)
"""

from __future__ import annotations

import dataclasses
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, ClassVar

from ccbatch.core.flags import deduplicate_flags
from ccbatch.core.options import CompileOptions, DefineEntry, LinkSubsystem, Rtti

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS: tuple[str, ...] = (
    ".c",
    ".cc",
    ".cpp",
    ".cxx",
    ".c++",
    ".i",
    ".f",
    ".for",
)
HEADER_EXTENSIONS: tuple[str, ...] = (".h", ".hpp", ".inl")

# Substring of the tool identifier that selects Windows subsystem switches
MINGW_MARKER = "mingw"


@dataclass(frozen=True)
class GccCompiler:
    """A GCC command-line compatible compiler.

    Instances are immutable; use with_identifier() to derive a variant for a
    detected target.

    Attributes:
        command: Compiler executable (e.g., 'gcc').
        identifier: Tool identifier, usually the target triple reported by
                    ``gcc -dumpmachine``. Gates platform-conditional flags.
        libtool: Run the compiler through libtool.
        source_extensions: Suffixes that are compiled.
        header_extensions: Suffixes that are recognized but never compiled.
    """

    # Flags that take their argument as a separate token
    SEPARATED_ARG_FLAGS: ClassVar[frozenset[str]] = frozenset(
        [
            # Framework/library paths (macOS)
            "-F",
            "-framework",
            "-iframework",
            # Linker flags that take arguments
            "-Wl,-rpath",
            "-Wl,-install_name",
            "-Wl,-soname",
            # Output-related
            "-o",
            "-MF",
            "-MT",
            "-MQ",
            # Linker script
            "-T",
            # Architecture
            "-arch",
            "-target",
            "--target",
            # Source language
            "-x",
            # Preprocessor inputs and search modifiers
            "-include",
            "-imacros",
            "-isystem",
            "-isysroot",
            "-iquote",
            "-idirafter",
            # Passthrough to other tools
            "-Xlinker",
            "-Xpreprocessor",
            "-Xassembler",
        ]
    )

    command: str = "gcc"
    identifier: str = "gcc"
    libtool: bool = False
    source_extensions: tuple[str, ...] = SOURCE_EXTENSIONS
    header_extensions: tuple[str, ...] = HEADER_EXTENSIONS

    @property
    def object_suffix(self) -> str:
        return ".fo" if self.libtool else ".o"

    def with_identifier(self, identifier: str) -> GccCompiler:
        return dataclasses.replace(self, identifier=identifier)

    # =========================================================================
    # Flag translation
    # =========================================================================

    def implied_flags(self, options: CompileOptions) -> list[str]:
        """Translate compile options into compiler flags.

        The order is fixed: compile-only, debug or optimization, Windows
        subsystem (MinGW identifiers only), RTTI. Debug always wins over
        optimization.

        Args:
            options: The abstract compile options.

        Returns:
            Ordered list of flags, always starting with '-c'.
        """
        # -fPIC is left to the caller on platforms that need it
        args = ["-c"]
        if options.debug:
            args.append("-g")
        elif options.optimization is not None:
            optimization = options.optimization
            if optimization.is_size:
                args.append("-Os")
            elif optimization.is_speed:
                if optimization.tier == "full":
                    args.append("-O2")
                elif optimization.tier == "speed":
                    args.append("-O1")
                else:
                    args.append("-O3")
        if MINGW_MARKER in self.identifier:
            if options.subsystem is LinkSubsystem.CONSOLE:
                args.append("-mconsole")
            if options.subsystem is LinkSubsystem.GUI:
                args.append("-mwindows")
        if options.rtti is Rtti.DISABLED:
            args.append("-fno-rtti")
        return args

    def include_path_flag(self, path: str | os.PathLike[str]) -> str:
        """Return the include flag for a directory. The path is not quoted."""
        return f"-I{os.fspath(path)}"

    def warning_flags(self, level: int) -> list[str]:
        """Return the flags for a warning level.

        0 silences all warnings, 3 to 5 add progressively stricter checks.
        1, 2 and any other value produce no flags.
        """
        if level == 0:
            return ["-w"]
        if level == 3:
            return ["-Wall"]
        if level == 4:
            return ["-W", "-Wall"]
        if level == 5:
            return ["-Werror", "-W", "-Wall"]
        return []

    def define_flag(self, name: str, value: str | None = None) -> str:
        """Return a -D flag; the value is appended only when non-empty."""
        if value:
            return f"-D{name}={value}"
        return f"-D{name}"

    def define_entry_flag(self, define: DefineEntry) -> str:
        return self.define_flag(define.name, define.value)

    def undefine_flag(self, name: str) -> str:
        return f"-U{name}"

    def compile_args(
        self,
        options: CompileOptions,
        includes: Iterable[str | os.PathLike[str]] = (),
        defines: Iterable[DefineEntry] = (),
        undefines: Iterable[str] = (),
        warning_level: int | None = None,
        extra_flags: Iterable[str] = (),
    ) -> list[str]:
        """Assemble the leading arguments for a batch.

        Implied flags come first, then warnings, include directories,
        defines, undefines and finally extra flags. Repeated generated
        tokens are dropped, keeping the first occurrence; extra flags are
        appended unchanged.

        Returns:
            List of flags suitable for MakefileGenerator's ``args``.
        """
        args = self.implied_flags(options)
        if warning_level is not None:
            args.extend(self.warning_flags(warning_level))
        args.extend(self.include_path_flag(inc) for inc in includes)
        args.extend(self.define_entry_flag(d) for d in defines)
        args.extend(self.undefine_flag(name) for name in undefines)
        args = deduplicate_flags(args, self.SEPARATED_ARG_FLAGS)
        args.extend(extra_flags)
        return args

    def environment_include_path(
        self, environ: Mapping[str, str] | None = None
    ) -> list[Path]:
        """Return the directories listed in the INCLUDE environment variable."""
        if environ is None:
            environ = os.environ
        value = environ.get("INCLUDE", "")
        return [Path(entry) for entry in value.split(":") if entry]

    # =========================================================================
    # Output names
    # =========================================================================

    def is_source(self, source: str | os.PathLike[str]) -> bool:
        name = os.fspath(source).lower()
        return name.endswith(self.source_extensions)

    def is_header(self, source: str | os.PathLike[str]) -> bool:
        name = os.fspath(source).lower()
        return name.endswith(self.header_extensions)

    def output_file_names(self, source: str | os.PathLike[str]) -> list[str]:
        """Map a source file to the object file it compiles to.

        The object name is relative to the batch output directory.

        Returns:
            A one-element list for compilable sources, an empty list for
            headers and unrecognized files.
        """
        if not self.is_source(source):
            return []
        base = PurePath(os.fspath(source)).name
        return [base.rpartition(".")[0] + self.object_suffix]


def detect_identifier(command: str) -> str:
    """Ask a compiler for its target triple with ``-dumpmachine``.

    Returns:
        The stripped output, or an empty string if the compiler could not
        be run or exited with an error.
    """
    try:
        output = subprocess.check_output(
            [command, "-dumpmachine"], text=True, stderr=subprocess.DEVNULL
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("Could not query %s for its target: %s", command, e)
        return ""
    return output.strip()


# =============================================================================
# Variants
# =============================================================================

GCC = GccCompiler()
GXX = GccCompiler(command="g++", identifier="g++")
MINGW_GCC = GccCompiler(
    command="x86_64-w64-mingw32-gcc", identifier="x86_64-w64-mingw32"
)
LIBTOOL_GCC = GccCompiler(libtool=True)

COMPILERS: dict[str, GccCompiler] = {
    "gcc": GCC,
    "g++": GXX,
    "mingw": MINGW_GCC,
    "libtool": LIBTOOL_GCC,
}


def get_compiler(name: str) -> GccCompiler:
    """Look up a compiler variant by name.

    Raises:
        KeyError: If the name is not one of COMPILERS.
    """
    try:
        return COMPILERS[name]
    except KeyError:
        known = ", ".join(sorted(COMPILERS))
        raise KeyError(f"unknown compiler {name!r} (known: {known})") from None
