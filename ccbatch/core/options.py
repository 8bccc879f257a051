# SPDX-License-Identifier: MIT
"""Abstract compile options.

These value types describe what a compilation should do without naming any
compiler switches. Toolchains translate them into command-line tokens
(see ccbatch.toolchains.gcc).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LinkSubsystem(Enum):
    """Subsystem the compiled code is eventually linked for."""

    CONSOLE = "console"
    GUI = "gui"
    OTHER = "other"


class Rtti(Enum):
    """Run-time type information policy.

    There is no switch that explicitly enables RTTI, so ENABLED and DEFAULT
    translate to nothing; only DISABLED produces a flag.
    """

    DEFAULT = "default"
    ENABLED = "enabled"
    DISABLED = "disabled"

    @classmethod
    def from_bool(cls, value: bool | None) -> Rtti:
        """Convert a nullable boolean (None meaning unset)."""
        if value is None:
            return cls.DEFAULT
        return cls.ENABLED if value else cls.DISABLED


class OptimizationKind(Enum):
    SIZE = "size"
    SPEED = "speed"


@dataclass(frozen=True)
class OptimizationSpec:
    """Requested optimization.

    Attributes:
        kind: Optimize for size or for speed.
        tier: Speed tier name ("speed", "full", or a more aggressive level).
              Ignored for SIZE.
    """

    kind: OptimizationKind
    tier: str = ""

    @classmethod
    def for_size(cls) -> OptimizationSpec:
        return cls(OptimizationKind.SIZE, "size")

    @classmethod
    def for_speed(cls, tier: str) -> OptimizationSpec:
        return cls(OptimizationKind.SPEED, tier)

    @classmethod
    def parse(cls, name: str | None) -> OptimizationSpec | None:
        """Parse an optimization level name.

        Recognized names are "none", "size", "minimal", "speed", "full",
        "aggressive", "extreme" and "unsafe". "none" and the empty string
        mean no optimization; "size" optimizes for size; every other name
        is a speed tier.

        Examples:
            >>> OptimizationSpec.parse("none") is None
            True
            >>> OptimizationSpec.parse("full")
            OptimizationSpec(kind=<OptimizationKind.SPEED: 'speed'>, tier='full')
        """
        if not name or name == "none":
            return None
        if name == "size":
            return cls.for_size()
        return cls.for_speed(name)

    @property
    def is_size(self) -> bool:
        return self.kind is OptimizationKind.SIZE

    @property
    def is_speed(self) -> bool:
        return self.kind is OptimizationKind.SPEED


@dataclass(frozen=True)
class CompileOptions:
    """Abstract description of a compilation.

    When ``debug`` is true no optimization flag is emitted, whatever
    ``optimization`` holds.

    Attributes:
        debug: Generate debug information.
        multithreaded: Multithreaded runtime (not translated by GCC).
        exceptions: C++ exception support (not translated by GCC).
        subsystem: Link subsystem.
        rtti: Run-time type information policy.
        optimization: Requested optimization, or None for the default.
    """

    debug: bool = False
    multithreaded: bool = False
    exceptions: bool = False
    subsystem: LinkSubsystem = LinkSubsystem.OTHER
    rtti: Rtti = Rtti.DEFAULT
    optimization: OptimizationSpec | None = None


@dataclass(frozen=True)
class DefineEntry:
    """A preprocessor definition. An empty value is the same as no value."""

    name: str
    value: str | None = None
