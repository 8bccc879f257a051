# SPDX-License-Identifier: MIT
"""Generator base for build file generation.

A generator renders build system text (a Makefile, for now) and writes it
to a fixed file name inside an output directory.
"""

from __future__ import annotations

from pathlib import Path


class BaseGenerator:
    """Base class for generators with common functionality."""

    def __init__(self, name: str, filename: str) -> None:
        """Initialize a generator.

        Args:
            name: Generator name.
            filename: File name written inside the output directory.
        """
        self._name = name
        self._filename = filename

    @property
    def name(self) -> str:
        return self._name

    @property
    def filename(self) -> str:
        return self._filename

    def output_path(self, output_dir: Path) -> Path:
        return Path(output_dir) / self._filename

    def write(self, output_dir: Path, text: str) -> Path:
        """Write rendered text, replacing any previous file.

        Line endings are written exactly as rendered.

        Raises:
            OSError: If the file cannot be written.
        """
        path = self.output_path(output_dir)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        return path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
