# SPDX-License-Identifier: MIT
"""Tests for ccbatch.toolchains.gcc."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from ccbatch.core.flags import deduplicate_flags
from ccbatch.core.options import (
    CompileOptions,
    DefineEntry,
    LinkSubsystem,
    OptimizationSpec,
    Rtti,
)
from ccbatch.toolchains.gcc import (
    GCC,
    GXX,
    LIBTOOL_GCC,
    MINGW_GCC,
    GccCompiler,
    detect_identifier,
    get_compiler,
)

ALL_OPTIMIZATIONS = [
    None,
    OptimizationSpec.for_size(),
    OptimizationSpec.for_speed("speed"),
    OptimizationSpec.for_speed("full"),
    OptimizationSpec.for_speed("aggressive"),
]
OPTIMIZATION_FLAGS = {"-Os", "-O1", "-O2", "-O3"}


class TestImpliedFlags:
    def test_defaults(self):
        assert GCC.implied_flags(CompileOptions()) == ["-c"]

    def test_debug(self):
        assert GCC.implied_flags(CompileOptions(debug=True)) == ["-c", "-g"]

    @pytest.mark.parametrize("optimization", ALL_OPTIMIZATIONS)
    def test_debug_suppresses_optimization(self, optimization):
        flags = GCC.implied_flags(CompileOptions(debug=True, optimization=optimization))
        assert "-g" in flags
        assert not OPTIMIZATION_FLAGS & set(flags)

    @pytest.mark.parametrize(
        "optimization,expected",
        [
            (OptimizationSpec.for_size(), "-Os"),
            (OptimizationSpec.for_speed("speed"), "-O1"),
            (OptimizationSpec.for_speed("full"), "-O2"),
            (OptimizationSpec.for_speed("aggressive"), "-O3"),
            (OptimizationSpec.for_speed("extreme"), "-O3"),
            (OptimizationSpec.for_speed("minimal"), "-O3"),
        ],
    )
    def test_optimization_tiers(self, optimization, expected):
        flags = GCC.implied_flags(CompileOptions(optimization=optimization))
        assert flags == ["-c", expected]

    def test_subsystem_ignored_without_mingw(self):
        for subsystem in LinkSubsystem:
            assert GCC.implied_flags(CompileOptions(subsystem=subsystem)) == ["-c"]

    def test_mingw_console(self):
        flags = MINGW_GCC.implied_flags(
            CompileOptions(subsystem=LinkSubsystem.CONSOLE)
        )
        assert flags == ["-c", "-mconsole"]

    def test_mingw_gui(self):
        flags = MINGW_GCC.implied_flags(CompileOptions(subsystem=LinkSubsystem.GUI))
        assert flags == ["-c", "-mwindows"]

    def test_mingw_other_subsystem(self):
        flags = MINGW_GCC.implied_flags(CompileOptions(subsystem=LinkSubsystem.OTHER))
        assert flags == ["-c"]

    def test_marker_matched_anywhere_in_identifier(self):
        compiler = GCC.with_identifier("i686-pc-mingw32")
        flags = compiler.implied_flags(CompileOptions(subsystem=LinkSubsystem.GUI))
        assert flags == ["-c", "-mwindows"]

    def test_rtti(self):
        assert GCC.implied_flags(CompileOptions(rtti=Rtti.DISABLED)) == [
            "-c",
            "-fno-rtti",
        ]
        assert GCC.implied_flags(CompileOptions(rtti=Rtti.ENABLED)) == ["-c"]
        assert GCC.implied_flags(CompileOptions(rtti=Rtti.DEFAULT)) == ["-c"]

    def test_full_ordering(self):
        options = CompileOptions(
            debug=False,
            optimization=OptimizationSpec.for_speed("full"),
            subsystem=LinkSubsystem.CONSOLE,
            rtti=Rtti.DISABLED,
        )
        assert MINGW_GCC.implied_flags(options) == [
            "-c",
            "-O2",
            "-mconsole",
            "-fno-rtti",
        ]

    def test_multithreaded_and_exceptions_not_translated(self):
        options = CompileOptions(multithreaded=True, exceptions=True)
        assert GCC.implied_flags(options) == ["-c"]


class TestWarningFlags:
    @pytest.mark.parametrize(
        "level,expected",
        [
            (0, ["-w"]),
            (1, []),
            (2, []),
            (3, ["-Wall"]),
            (4, ["-W", "-Wall"]),
            (5, ["-Werror", "-W", "-Wall"]),
            (6, []),
            (-1, []),
        ],
    )
    def test_levels(self, level, expected):
        assert GCC.warning_flags(level) == expected


class TestSimpleFlags:
    def test_include_path(self):
        assert GCC.include_path_flag("/usr/include") == "-I/usr/include"
        assert GCC.include_path_flag(Path("inc")) == "-Iinc"

    def test_include_path_not_quoted(self):
        assert GCC.include_path_flag("my dir") == "-Imy dir"

    def test_define(self):
        assert GCC.define_flag("FOO", "") == "-DFOO"
        assert GCC.define_flag("FOO") == "-DFOO"
        assert GCC.define_flag("FOO", "1") == "-DFOO=1"

    def test_define_entry(self):
        assert GCC.define_entry_flag(DefineEntry("FOO", "")) == "-DFOO"
        assert GCC.define_entry_flag(DefineEntry("FOO", "bar")) == "-DFOO=bar"

    def test_undefine(self):
        assert GCC.undefine_flag("FOO") == "-UFOO"

    def test_no_name_validation(self):
        assert GCC.define_flag("A B", "x y") == "-DA B=x y"


class TestCompileArgs:
    def test_order(self):
        args = GCC.compile_args(
            CompileOptions(debug=True),
            includes=["inc"],
            defines=[DefineEntry("A", "1")],
            undefines=["B"],
            warning_level=4,
            extra_flags=["-fPIC"],
        )
        assert args == ["-c", "-g", "-W", "-Wall", "-Iinc", "-DA=1", "-UB", "-fPIC"]

    def test_generated_duplicates_removed(self):
        args = GCC.compile_args(
            CompileOptions(),
            includes=["inc", "inc"],
            defines=[DefineEntry("A"), DefineEntry("A", "")],
        )
        assert args == ["-c", "-Iinc", "-DA"]

    def test_extra_flags_passed_through(self):
        args = GCC.compile_args(CompileOptions(), extra_flags=["-c", "-fPIC", "-fPIC"])
        assert args == ["-c", "-c", "-fPIC", "-fPIC"]

    @pytest.mark.parametrize(
        "extra",
        [
            ["-arch", "x86_64", "-arch", "arm64"],
            ["-x", "c", "a.c", "-x", "c++"],
            ["-target", "a", "-target", "a"],
            ["-Xlinker", "-z", "-Xlinker", "defs"],
        ],
    )
    def test_repeated_pair_flags_kept_intact(self, extra):
        args = GCC.compile_args(CompileOptions(), extra_flags=extra)
        assert args == ["-c", *extra]

    def test_separated_args_kept(self):
        args = GCC.compile_args(
            CompileOptions(), extra_flags=["-isystem", "a", "-isystem", "b"]
        )
        assert args == ["-c", "-isystem", "a", "-isystem", "b"]


class TestEnvironmentIncludePath:
    def test_split(self):
        paths = GCC.environment_include_path({"INCLUDE": "/a::/b"})
        assert paths == [Path("/a"), Path("/b")]

    def test_unset(self):
        assert GCC.environment_include_path({}) == []

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("INCLUDE", "/x")
        assert GCC.environment_include_path() == [Path("/x")]


class TestOutputFileNames:
    @pytest.mark.parametrize(
        "source,expected",
        [
            ("src/main.c", ["main.o"]),
            ("a/b/util.cpp", ["util.o"]),
            ("x.CC", ["x.o"]),
            ("lib.c++", ["lib.o"]),
            ("prog.for", ["prog.o"]),
            ("pre.i", ["pre.o"]),
        ],
    )
    def test_sources(self, source, expected):
        assert GCC.output_file_names(source) == expected

    @pytest.mark.parametrize("source", ["inc/a.h", "b.hpp", "c.inl", "README", "d.o"])
    def test_not_compiled(self, source):
        assert GCC.output_file_names(source) == []

    def test_libtool_suffix(self):
        assert LIBTOOL_GCC.object_suffix == ".fo"
        assert LIBTOOL_GCC.output_file_names("main.c") == ["main.fo"]

    def test_path_object(self):
        assert GCC.output_file_names(Path("src") / "main.c") == ["main.o"]

    def test_is_header(self):
        assert GCC.is_header("a.H")
        assert not GCC.is_header("a.c")


class TestVariants:
    def test_commands(self):
        assert GCC.command == "gcc"
        assert GXX.command == "g++"
        assert MINGW_GCC.command == "x86_64-w64-mingw32-gcc"
        assert LIBTOOL_GCC.libtool

    def test_get_compiler(self):
        assert get_compiler("gcc") is GCC
        assert get_compiler("mingw") is MINGW_GCC

    def test_get_compiler_unknown(self):
        with pytest.raises(KeyError, match="unknown compiler"):
            get_compiler("tcc")

    def test_with_identifier_returns_copy(self):
        compiler = GCC.with_identifier("x86_64-linux-gnu")
        assert compiler.identifier == "x86_64-linux-gnu"
        assert GCC.identifier == "gcc"
        assert isinstance(compiler, GccCompiler)

    def test_separated_arg_flags_not_a_field(self):
        assert "-isystem" in GccCompiler.SEPARATED_ARG_FLAGS
        assert GccCompiler() == GCC


class TestDetectIdentifier:
    def test_returns_stripped_output(self):
        with patch("subprocess.check_output", return_value="x86_64-w64-mingw32\n") as mock:
            assert detect_identifier("gcc") == "x86_64-w64-mingw32"
        assert mock.call_args[0][0] == ["gcc", "-dumpmachine"]

    def test_missing_compiler(self):
        with patch("subprocess.check_output", side_effect=FileNotFoundError("gcc")):
            assert detect_identifier("gcc") == ""

    def test_compiler_error(self):
        error = subprocess.CalledProcessError(1, ["gcc", "-dumpmachine"])
        with patch("subprocess.check_output", side_effect=error):
            assert detect_identifier("gcc") == ""


class TestSeparatedArgFlags:
    @pytest.mark.parametrize(
        "flag", ["-arch", "-target", "--target", "-T", "-Xlinker", "-F", "-x"]
    )
    def test_pair_flags_known(self, flag):
        assert flag in GccCompiler.SEPARATED_ARG_FLAGS

    def test_deduplicating_pairs_keeps_arguments(self):
        flags = ["-x", "c", "-x", "c++", "-arch", "arm64", "-arch", "arm64"]
        assert deduplicate_flags(flags, GccCompiler.SEPARATED_ARG_FLAGS) == [
            "-x",
            "c",
            "-x",
            "c++",
            "-arch",
            "arm64",
        ]
