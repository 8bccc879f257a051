# SPDX-License-Identifier: MIT
"""Source locations for error reporting.

Errors raised while running a batch point back at the line of the user's
build script that requested it, not at ccbatch internals.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceLocation:
    """A file and line number.

    Attributes:
        filename: Path of the file.
        lineno: 1-based line number.
    """

    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"


def get_caller_location(depth: int = 2) -> SourceLocation | None:
    """Return the location of the first frame outside the ccbatch package.

    Args:
        depth: Number of frames to skip before searching (the caller of
               this function and its own caller by default).

    Returns:
        The location, or None if every remaining frame is internal.
    """
    package_dir = Path(__file__).resolve().parent.parent
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            if frame is None:
                return None
            frame = frame.f_back
        while frame is not None:
            filename = frame.f_code.co_filename
            if not Path(filename).resolve().is_relative_to(package_dir):
                return SourceLocation(filename, frame.f_lineno)
            frame = frame.f_back
        return None
    finally:
        del frame
