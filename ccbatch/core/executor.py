# SPDX-License-Identifier: MIT
"""Batch compilation through make.

A batch writes one Makefile into the output directory and runs
``make -j 8 -C <output_dir> all`` once. make decides the per-file
parallelism; ccbatch only sees the single exit code of the whole batch, so
a failed batch cannot say which sources failed.

The Makefile has a fixed name. Two batches must not share an output
directory at the same time.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ccbatch.core.errors import (
    ExternalToolFailure,
    PersistenceFailure,
    ProcessLaunchFailure,
)
from ccbatch.generators.makefile import MakefileGenerator
from ccbatch.util.source_location import get_caller_location

if TYPE_CHECKING:
    import os
    from collections.abc import Callable, Sequence

    from ccbatch.toolchains.gcc import GccCompiler
    from ccbatch.util.source_location import SourceLocation

    ProgressCallback = Callable[[Sequence[str | os.PathLike[str]]], None]

logger = logging.getLogger(__name__)

DEFAULT_MAKE_COMMAND = "make"
DEFAULT_JOBS = 8


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one batch.

    Attributes:
        exit_code: Exit status of make.
        tolerated_failure: make failed but the batch was relentless.
        failure: The failure that was tolerated, if any.
    """

    exit_code: int
    tolerated_failure: bool = False
    failure: ExternalToolFailure | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0 or self.tolerated_failure


class BatchExecutor:
    """Compiles batches of sources with one make invocation each.

    Attributes:
        compiler: Compiler the batch is built with.
        make_command: make executable.
        jobs: Parallel jobs passed to make.
    """

    def __init__(
        self,
        compiler: GccCompiler,
        make_command: str = DEFAULT_MAKE_COMMAND,
        jobs: int = DEFAULT_JOBS,
    ) -> None:
        self.compiler = compiler
        self.make_command = make_command
        self.jobs = jobs
        self.generator = MakefileGenerator(compiler)

    def make_invocation(self, output_dir: Path) -> list[str]:
        return [
            self.make_command,
            "-j",
            str(self.jobs),
            "-C",
            str(Path(output_dir).absolute()),
            "all",
        ]

    def execute(
        self,
        output_dir: Path,
        sources: Sequence[str | os.PathLike[str]],
        args: Sequence[str],
        end_args: Sequence[str],
        relentless: bool = False,
        progress: ProgressCallback | None = None,
        location: SourceLocation | None = None,
    ) -> BuildResult:
        """Compile a batch of sources.

        Args:
            output_dir: Directory receiving the Makefile and the objects.
            sources: Source files to compile; headers are skipped.
            args: Arguments placed before the output and source.
            end_args: Arguments placed after the source.
            relentless: Return instead of raising when make fails.
            progress: Called once with ``sources`` after make exits.
            location: Location reported in errors; defaults to the caller.

        Returns:
            The batch result. A relentless batch that failed is returned
            with ``tolerated_failure`` set and the failure recorded.

        Raises:
            PersistenceFailure: If the Makefile cannot be written.
            ProcessLaunchFailure: If make cannot be started.
            ExternalToolFailure: If make fails and ``relentless`` is False.
        """
        if location is None:
            location = get_caller_location()
        output_dir = Path(output_dir)
        makefile = self.generator.output_path(output_dir)

        try:
            self.generator.generate(output_dir, sources, args, end_args)
        except OSError as e:
            raise PersistenceFailure(str(makefile), location) from e
        logger.debug("Wrote %s", makefile)

        cmd = self.make_invocation(output_dir)
        logger.info("Running: %s", " ".join(cmd))
        try:
            returncode = subprocess.run(cmd, cwd=output_dir).returncode
        except OSError as e:
            raise ProcessLaunchFailure(self.make_command, str(e), location) from e

        if progress is not None:
            progress(sources)

        if returncode == 0:
            return BuildResult(returncode)

        failure = ExternalToolFailure(
            self.compiler.command, returncode, invocation=cmd, location=location
        )
        if not relentless:
            raise failure
        logger.warning("%s (continuing)", failure)
        return BuildResult(returncode, tolerated_failure=True, failure=failure)
