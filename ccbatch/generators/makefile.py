# SPDX-License-Identifier: MIT
"""Makefile generator for batch compilation.

Renders one self-contained Makefile that compiles a list of sources with
shared leading and trailing arguments. Layout:

    OPT_ARGS := \\
    	-c\\
    	-O2

    OPT_END_ARGS :=

    OBJECTS := \\
    	main.o

    main.o:
    	gcc -pipe $(OPT_ARGS) -o "$@" "src/main.c" $(OPT_END_ARGS)


    .PHONY: $(OBJECTS)
    all:$(OBJECTS)

Objects are declared phony, so every run recompiles every source; the file
is regenerated from scratch on each batch.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from ccbatch.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ccbatch.toolchains.gcc import GccCompiler

    ObjectMapper = Callable[[str], Sequence[str]]

logger = logging.getLogger(__name__)

MAKEFILE_NAME = "Makefile"


def _list_variable(name: str, values: Sequence[str]) -> list[str]:
    """Return the lines of a line-continued variable assignment."""
    lines = [f"{name} := "]
    for value in values:
        lines[-1] += "\\"
        lines.append(f"\t{value}")
    return lines


class MakefileGenerator(BaseGenerator):
    """Generator for batch compilation Makefiles.

    Example:
        generator = MakefileGenerator(GCC)
        generator.generate(build_dir, ["src/a.c", "src/b.c"], ["-c", "-O2"], [])
        # Creates <build_dir>/Makefile; run with `make -C <build_dir> all`
    """

    def __init__(self, compiler: GccCompiler) -> None:
        super().__init__("make", MAKEFILE_NAME)
        self.compiler = compiler

    def render(
        self,
        sources: Sequence[str | os.PathLike[str]],
        args: Sequence[str],
        end_args: Sequence[str],
        mapper: ObjectMapper | None = None,
        command: str | None = None,
        libtool: bool | None = None,
        linesep: str = os.linesep,
    ) -> str:
        """Render the Makefile text.

        Sources the mapper returns no object for (headers, unknown files)
        are skipped. Rules keep the order of ``sources``.

        Args:
            sources: Source files, in build order.
            args: Arguments placed before the output and source.
            end_args: Arguments placed after the source.
            mapper: Maps a source to its object names; defaults to the
                    compiler's output_file_names.
            command: Compiler command; defaults to the compiler's command.
            libtool: Prefix each recipe with 'libtool'; defaults to the
                     compiler's setting.
            linesep: Line separator.

        Returns:
            The complete Makefile text.
        """
        if mapper is None:
            mapper = self.compiler.output_file_names
        if command is None:
            command = self.compiler.command
        if libtool is None:
            libtool = self.compiler.libtool
        prefix = "libtool " if libtool else ""

        objects: list[str] = []
        rules: list[str] = []
        for source in sources:
            outputs = mapper(os.fspath(source))
            if not outputs:
                if self.compiler.is_header(source):
                    logger.debug("Skipping header %s", os.fspath(source))
                else:
                    logger.debug("Skipping %s: no object file", os.fspath(source))
                continue
            obj = outputs[0]
            objects.append(obj)
            rules.append(f"{obj}:")
            rules.append(
                f"\t{prefix}{command} -pipe $(OPT_ARGS) "
                f'-o "$@" "{os.fspath(source)}" $(OPT_END_ARGS)'
            )

        lines = _list_variable("OPT_ARGS", args)
        lines.append("")
        lines.extend(_list_variable("OPT_END_ARGS", end_args))
        lines.append("")
        lines.extend(_list_variable("OBJECTS", objects))
        lines.append("")
        lines.extend(rules)
        lines.extend(["", ""])
        lines.append(".PHONY: $(OBJECTS)")
        lines.append("all:$(OBJECTS)")

        logger.debug("Rendered %d of %d sources", len(objects), len(sources))
        return linesep.join(lines) + linesep

    def generate(
        self,
        output_dir: Path,
        sources: Sequence[str | os.PathLike[str]],
        args: Sequence[str],
        end_args: Sequence[str],
    ) -> Path:
        """Render the Makefile and write it into ``output_dir``.

        Returns:
            Path of the written Makefile.

        Raises:
            OSError: If the file cannot be written.
        """
        return self.write(output_dir, self.render(sources, args, end_args))
