# SPDX-License-Identifier: MIT
"""Flag list utilities.

Flags such as -I, -D and -U carry their argument attached (``-Ipath``), while
others like -isystem or -MF take it as the next token (``-isystem path``).
When de-duplicating a compile argument list the flag and its separate
argument must be treated as one unit.

The set of flags that take a separate argument belongs to the toolchain
(see GccCompiler.SEPARATED_ARG_FLAGS) and is passed in by the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def is_separated_arg_flag(flag: str, separated_arg_flags: frozenset[str]) -> bool:
    """Check if a flag takes its argument as a separate token.

    Examples:
        >>> is_separated_arg_flag("-isystem", frozenset(["-isystem"]))
        True
        >>> is_separated_arg_flag("-O2", frozenset(["-isystem"]))
        False
    """
    return flag in separated_arg_flags


def deduplicate_flags(
    flags: Iterable[str], separated_arg_flags: frozenset[str] = frozenset()
) -> list[str]:
    """De-duplicate flags, keeping the first occurrence of each.

    Attached-argument flags (-DFOO, -Ipath) are compared as whole tokens;
    separated-argument flags (-isystem path) are compared as pairs.

    Examples:
        >>> deduplicate_flags(["-c", "-Wall", "-c"])
        ['-c', '-Wall']
        >>> deduplicate_flags(["-MF", "a.d", "-MF", "b.d"], frozenset(["-MF"]))
        ['-MF', 'a.d', '-MF', 'b.d']
    """
    tokens = list(flags)
    result: list[str] = []
    seen: set[str | tuple[str, str]] = set()
    i = 0

    while i < len(tokens):
        flag = tokens[i]
        if is_separated_arg_flag(flag, separated_arg_flags) and i + 1 < len(tokens):
            pair = (flag, tokens[i + 1])
            if pair not in seen:
                seen.add(pair)
                result.extend(pair)
            i += 2
        else:
            if flag not in seen:
                seen.add(flag)
                result.append(flag)
            i += 1

    return result
