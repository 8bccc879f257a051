# SPDX-License-Identifier: MIT
"""Build file generators for ccbatch."""

from ccbatch.generators.generator import BaseGenerator
from ccbatch.generators.makefile import MAKEFILE_NAME, MakefileGenerator

__all__ = [
    "BaseGenerator",
    "MAKEFILE_NAME",
    "MakefileGenerator",
]
