# SPDX-License-Identifier: MIT
"""Toolchain definitions."""

from ccbatch.toolchains.gcc import (
    COMPILERS,
    GCC,
    GXX,
    LIBTOOL_GCC,
    MINGW_GCC,
    GccCompiler,
    detect_identifier,
    get_compiler,
)

__all__ = [
    "COMPILERS",
    "GCC",
    "GXX",
    "LIBTOOL_GCC",
    "MINGW_GCC",
    "GccCompiler",
    "detect_identifier",
    "get_compiler",
]
