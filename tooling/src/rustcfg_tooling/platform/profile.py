"""Platform profiles: library naming, link conventions and debug tooling per OS family.

The OS identifier is classified once into an OsFamily; each family has a pure
builder returning a complete PlatformProfile. The MinGW cross override is
applied on top of whatever the family builder produced and always wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from rustcfg_tooling.errors import UnknownOsError

if TYPE_CHECKING:
    from rustcfg_tooling.config import BuildOptions

log = logging.getLogger(__name__)

MINGW_CROSS_PREFIX = "i586-mingw32msvc-"
DEFAULT_TIME_TOOL = "/usr/bin/time"
WIN_PATH_MUNGE: tuple[str, ...] = (
    "perl",
    "-i.bak",
    "-p",
    "-e",
    r"s@\\(\S)@/\1@go;",
    "-e",
    r"s@^/([a-zA-Z])/@\1:/@o;",
)

# (arch, flags) pairs for the two x86 flavours; shared by Linux and FreeBSD.
_X86_ARCH_FLAGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("i386", ("-m32",)),
    ("x86_64", ("-m64",)),
)


class OsFamily(str, Enum):
    LINUX = "linux"
    FREEBSD = "freebsd"
    DARWIN = "darwin"
    WINDOWS = "windows"


_OS_MARKERS: dict[OsFamily, tuple[str, ...]] = {
    OsFamily.FREEBSD: ("freebsd",),
    OsFamily.LINUX: ("linux",),
    OsFamily.DARWIN: ("darwin", "apple"),
    OsFamily.WINDOWS: ("mingw", "windows", "msys", "cygwin"),
}


def classify_os(ostype: str) -> OsFamily:
    """Map an OS identifier (unknown-linux-gnu, apple-darwin, pc-mingw32, ...) to one family.

    Raises UnknownOsError when the identifier names no supported family, or more than one.
    """
    s = ostype.lower()
    matches = [fam for fam, markers in _OS_MARKERS.items() if any(m in s for m in markers)]
    if not matches:
        msg = f"Unsupported OS identifier: {ostype!r} (expected linux, freebsd, darwin or mingw)"
        raise UnknownOsError(msg)
    if len(matches) > 1:
        names = ", ".join(m.value for m in matches)
        msg = f"Ambiguous OS identifier {ostype!r}: matches {names}"
        raise UnknownOsError(msg)
    return matches[0]


@dataclass(frozen=True)
class PlatformProfile:
    """Complete, immutable set of OS conventions for one configuration."""

    family: OsFamily
    lib_name_pattern: str
    lib_glob_pattern: str
    is_unixy: bool
    cflags: tuple[str, ...]
    link_flags: tuple[str, ...]
    ld_env: str
    def_suffix: str
    def_flag_prefix: str = ""
    pre_lib_flags: tuple[str, ...] = ()
    post_lib_flags: tuple[str, ...] = ()
    arch_cflags: tuple[tuple[str, tuple[str, ...]], ...] = ()
    arch_link_flags: tuple[tuple[str, tuple[str, ...]], ...] = ()
    install_name: str = ""
    dsymutil: tuple[str, ...] = ("true",)
    perf_tool: tuple[str, ...] = ()
    exe_suffix: str = ""
    libuv_link_flags: tuple[str, ...] = ("-lpthread",)
    path_munge: tuple[str, ...] = ("true",)
    cross_prefix: str = ""
    mingw_cross: bool = False
    llvm_build_env: tuple[tuple[str, str], ...] = ()
    runtime_env: tuple[tuple[str, str], ...] = ()

    @property
    def is_windowsy(self) -> bool:
        return not self.is_unixy

    def lib_name(self, name: str) -> str:
        """Shared library filename, e.g. core -> libcore.so / libcore.dylib / core.dll."""
        return self.lib_name_pattern.format(name=name)

    def lib_glob(self, name: str) -> str:
        """Glob matching hashed library filenames, e.g. libcore-*.so."""
        return self.lib_glob_pattern.format(name=name)

    def cflags_for(self, arch: str) -> tuple[str, ...]:
        return dict(self.arch_cflags).get(arch, ())

    def link_flags_for(self, arch: str) -> tuple[str, ...]:
        return dict(self.arch_link_flags).get(arch, ())

    def def_flag(self, def_file: str) -> tuple[str, ...]:
        """Export-list argument: the OS prefix glued to the path (one argv token)."""
        return (f"{self.def_flag_prefix}{def_file}",)

    def install_name_flags(self, name: str | None) -> tuple[str, ...]:
        if not self.install_name or not name:
            return ()
        return (self.install_name.format(name=name),)


def _base_cflags(options: BuildOptions) -> tuple[str, ...]:
    flags = ["-fno-strict-aliasing"]
    if not options.valgrind:
        flags.append("-DNVALGRIND")
    return tuple(flags)


def _optimize_flags(options: BuildOptions) -> tuple[str, ...]:
    return ("-O0",) if options.disable_optimize_cxx else ("-O2",)


def _linux_perf_tool(options: BuildOptions) -> tuple[str, ...]:
    """perf stat, else cachegrind, else /usr/bin/time --verbose."""
    if options.perf:
        cmd = (options.perf, "stat", "-r", "3")
        return cmd + ("--log-fd", "2") if options.perf_with_logfd else cmd
    if options.valgrind:
        return (options.valgrind, "--tool=cachegrind", "--cache-sim=yes", "--branch-sim=yes")
    return (DEFAULT_TIME_TOOL, "--verbose")


def _freebsd_profile(options: BuildOptions) -> PlatformProfile:
    # Runtime deadlocks on FreeBSD with more than one scheduler thread.
    runtime_env = () if options.rust_threads else (("RUST_THREADS", "1"),)
    return PlatformProfile(
        family=OsFamily.FREEBSD,
        lib_name_pattern="lib{name}.so",
        lib_glob_pattern="lib{name}-*.so",
        is_unixy=True,
        cflags=(*_base_cflags(options), "-fPIC", "-I/usr/local/include"),
        link_flags=("-shared", "-fPIC", "-lpthread", "-lrt"),
        ld_env="LD_LIBRARY_PATH",
        def_suffix=".bsd.def",
        def_flag_prefix="-Wl,--export-dynamic,--dynamic-list=",
        pre_lib_flags=("-Wl,-whole-archive",),
        post_lib_flags=("-Wl,-no-whole-archive",),
        arch_cflags=_X86_ARCH_FLAGS,
        arch_link_flags=_X86_ARCH_FLAGS,
        perf_tool=(DEFAULT_TIME_TOOL,),
        runtime_env=runtime_env,
    )


def _linux_profile(options: BuildOptions) -> PlatformProfile:
    return PlatformProfile(
        family=OsFamily.LINUX,
        lib_name_pattern="lib{name}.so",
        lib_glob_pattern="lib{name}-*.so",
        is_unixy=True,
        cflags=(*_base_cflags(options), "-fPIC"),
        link_flags=("-shared", "-fPIC", "-ldl", "-lpthread", "-lrt"),
        ld_env="LD_LIBRARY_PATH",
        def_suffix=".linux.def",
        def_flag_prefix="-Wl,--export-dynamic,--dynamic-list=",
        pre_lib_flags=("-Wl,-whole-archive",),
        # librt comes out with an executable stack; SELinux refuses to load it.
        post_lib_flags=("-Wl,-no-whole-archive", "-Wl,-znoexecstack"),
        arch_cflags=_X86_ARCH_FLAGS,
        arch_link_flags=_X86_ARCH_FLAGS,
        perf_tool=_linux_perf_tool(options),
        # Needed for backtraces through LLVM frames.
        llvm_build_env=(("CXXFLAGS", "-fno-omit-frame-pointer"),),
    )


def _darwin_profile(options: BuildOptions) -> PlatformProfile:
    # Darwin reports i386 on 64-bit userspace, so -arch is forced explicitly.
    return PlatformProfile(
        family=OsFamily.DARWIN,
        lib_name_pattern="lib{name}.dylib",
        lib_glob_pattern="lib{name}-*.dylib",
        is_unixy=True,
        cflags=_base_cflags(options),
        link_flags=(
            "-dynamiclib",
            "-lpthread",
            "-framework",
            "CoreServices",
            "-Wl,-no_compact_unwind",
        ),
        ld_env="DYLD_LIBRARY_PATH",
        def_suffix=".darwin.def",
        def_flag_prefix="-Wl,-exported_symbols_list,",
        arch_cflags=(
            ("i386", ("-m32", "-arch", "i386")),
            ("x86_64", ("-m64", "-arch", "x86_64")),
        ),
        arch_link_flags=_X86_ARCH_FLAGS,
        install_name="-Wl,-install_name,@rpath/{name}",
        dsymutil=("dsymutil",),
    )


def _windows_profile(options: BuildOptions) -> PlatformProfile:
    return PlatformProfile(
        family=OsFamily.WINDOWS,
        lib_name_pattern="{name}.dll",
        lib_glob_pattern="{name}-*.dll",
        is_unixy=False,
        cflags=(*_base_cflags(options), "-march=i686"),
        link_flags=("-shared", "-fPIC"),
        ld_env="PATH",
        def_suffix=".def",
        exe_suffix=".exe",
        libuv_link_flags=("-lWs2_32",),
        path_munge=WIN_PATH_MUNGE,
    )


_BUILDERS = {
    OsFamily.FREEBSD: _freebsd_profile,
    OsFamily.LINUX: _linux_profile,
    OsFamily.DARWIN: _darwin_profile,
    OsFamily.WINDOWS: _windows_profile,
}


def _apply_mingw_cross(profile: PlatformProfile, options: BuildOptions) -> PlatformProfile:
    """Retarget a profile at 32-bit MinGW via the i586-mingw32msvc- toolchain."""
    cflags: tuple[str, ...] = ("-fno-strict-aliasing", "-march=i586")
    link_flags: tuple[str, ...] = ("-shared",)
    if options.cputype == "x86_64":
        cflags += ("-m32",)
        link_flags += ("-m32",)
    return replace(
        profile,
        lib_name_pattern="{name}.dll",
        lib_glob_pattern="{name}-*.dll",
        is_unixy=False,
        cflags=cflags,
        link_flags=link_flags,
        def_suffix=".def",
        def_flag_prefix="",
        pre_lib_flags=(),
        post_lib_flags=(),
        install_name="",
        exe_suffix=".exe",
        libuv_link_flags=("-lWs2_32",),
        path_munge=("true",),
        cross_prefix=MINGW_CROSS_PREFIX,
        mingw_cross=True,
    )


def select_platform_profile(family: OsFamily, options: BuildOptions) -> PlatformProfile:
    """Build the one active profile for family + options (MinGW cross override last)."""
    profile = _BUILDERS[family](options)
    if options.disable_optimize_cxx:
        log.info("cfg: disabling C++ optimization (CFG_DISABLE_OPTIMIZE_CXX)")
    profile = replace(profile, cflags=profile.cflags + _optimize_flags(options))
    if options.mingw_cross:
        # Replaces the whole cflags set, optimisation level included.
        log.info("cfg: mingw-cross")
        profile = _apply_mingw_cross(profile, options)
    log.info("cfg: %s environment", "unix-y" if profile.is_unixy else "windows-y")
    return profile
