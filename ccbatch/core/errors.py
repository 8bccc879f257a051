# SPDX-License-Identifier: MIT
"""Custom exceptions for ccbatch.

All ccbatch exceptions inherit from CcbatchError, which includes
optional source location information for better error messages.

Flag translation and Makefile rendering never raise; every failure
comes from running a batch and derives from BuildFailure.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ccbatch.util.source_location import SourceLocation


class CcbatchError(Exception):
    """Base class for all ccbatch exceptions.

    Attributes:
        message: The error message.
        location: Optional source location where the error occurred.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class BuildFailure(CcbatchError):
    """A batch compilation could not be completed."""


class PersistenceFailure(BuildFailure):
    """The generated Makefile could not be written.

    Always fatal, even in relentless mode.

    Attributes:
        path: The file that could not be written.
    """

    def __init__(
        self,
        path: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.path = path
        super().__init__(f"Makefile generate failed: {path}", location)


class ProcessLaunchFailure(BuildFailure):
    """The external build tool could not be started.

    Attributes:
        command: The program that failed to launch.
    """

    def __init__(
        self,
        command: str,
        reason: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.command = command
        super().__init__(f"failed to run {command}: {reason}", location)


class ExternalToolFailure(BuildFailure):
    """The external build tool exited with a non-zero status.

    Attributes:
        command: The compiler command the batch was built with.
        exit_code: Exit status of the build tool.
        invocation: Full argument list of the build tool process.
    """

    def __init__(
        self,
        command: str,
        exit_code: int,
        invocation: Sequence[str] = (),
        location: SourceLocation | None = None,
    ) -> None:
        self.command = command
        self.exit_code = exit_code
        self.invocation = list(invocation)
        super().__init__(f"{command} failed with return code {exit_code}", location)
