"""C/C++ compiler backend selection and per-triple compile/link/depend templates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rustcfg_tooling.errors import UnsupportedCompilerError
from rustcfg_tooling.platform.profile import PlatformProfile
from rustcfg_tooling.platform.triple import Triple

log = logging.getLogger(__name__)


class CompilerFamily(str, Enum):
    CLANG = "clang"
    GCC = "gcc"


@dataclass(frozen=True)
class CompilerProfile:
    family: CompilerFamily
    cc: str
    cxx: str
    cpp: str
    warning_flags: tuple[str, ...]
    link_flags: tuple[str, ...] = ("-g",)


COMPILERS: dict[CompilerFamily, CompilerProfile] = {
    # -Wno-c++11-compat lets the runtime use 'alignof' as an identifier.
    CompilerFamily.CLANG: CompilerProfile(
        family=CompilerFamily.CLANG,
        cc="clang",
        cxx="clang++",
        cpp="cpp",
        warning_flags=("-Wall", "-Werror", "-Wno-c++11-compat", "-fno-rtti", "-g"),
    ),
    CompilerFamily.GCC: CompilerProfile(
        family=CompilerFamily.GCC,
        cc="gcc",
        cxx="g++",
        cpp="cpp",
        warning_flags=("-Wall", "-Werror", "-fno-rtti", "-g"),
    ),
}


def select_compiler(name: str | None) -> CompilerProfile:
    """Return the CompilerProfile for clang or gcc. Anything else is fatal."""
    if name:
        try:
            profile = COMPILERS[CompilerFamily(name.strip().lower())]
        except ValueError:
            pass
        else:
            log.info("cfg: using %s", profile.family.value)
            return profile
    msg = f"No usable C compiler ({name!r}): please try on a system with gcc or clang"
    raise UnsupportedCompilerError(msg)


def _s(p: str | Path) -> str:
    return p.as_posix() if isinstance(p, Path) else str(p)


@dataclass(frozen=True)
class CompileCommand:
    """<cross><cxx> <cflags> <arch cflags> -c -o OUT SRC"""

    compiler: str
    flags: tuple[str, ...]

    def argv(self, output: str | Path, source: str | Path) -> list[str]:
        return [self.compiler, *self.flags, "-c", "-o", _s(output), _s(source)]


@dataclass(frozen=True)
class LinkCommand:
    """<cross><cxx> <link flags> -o OUT <arch flags> [<def flag>FILE] INPUTS [<install name>]"""

    linker: str
    flags: tuple[str, ...]
    arch_flags: tuple[str, ...]
    profile: PlatformProfile

    def argv(
        self,
        output: str | Path,
        inputs: list[str | Path],
        def_file: str | Path | None = None,
        install_name: str | None = None,
    ) -> list[str]:
        cmd = [self.linker, *self.flags, "-o", _s(output), *self.arch_flags]
        if def_file:
            cmd.extend(self.profile.def_flag(_s(def_file)))
        cmd.extend(_s(i) for i in inputs)
        cmd.extend(self.profile.install_name_flags(install_name))
        return cmd


@dataclass(frozen=True)
class DependCommand:
    """<cross><cxx> <cflags> -MT TARGET -MM SRC"""

    compiler: str
    flags: tuple[str, ...]

    def argv(self, target: str | Path, source: str | Path) -> list[str]:
        return [self.compiler, *self.flags, "-MT", _s(target), "-MM", _s(source)]


def _cflags(profile: PlatformProfile, compiler: CompilerProfile) -> tuple[str, ...]:
    return profile.cflags + compiler.warning_flags


def build_compile_command(
    triple: Triple, profile: PlatformProfile, compiler: CompilerProfile
) -> CompileCommand:
    return CompileCommand(
        compiler=profile.cross_prefix + compiler.cxx,
        flags=_cflags(profile, compiler) + profile.cflags_for(triple.host_arch),
    )


def build_link_command(
    triple: Triple, profile: PlatformProfile, compiler: CompilerProfile
) -> LinkCommand:
    return LinkCommand(
        linker=profile.cross_prefix + compiler.cxx,
        flags=profile.link_flags + compiler.link_flags,
        arch_flags=profile.link_flags_for(triple.host_arch),
        profile=profile,
    )


def build_depend_command(profile: PlatformProfile, compiler: CompilerProfile) -> DependCommand:
    return DependCommand(
        compiler=profile.cross_prefix + compiler.cxx,
        flags=_cflags(profile, compiler),
    )
