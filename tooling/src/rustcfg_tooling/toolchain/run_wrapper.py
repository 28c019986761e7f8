"""Command prefixes for running freshly built programs and test binaries.

Unix-y hosts rely on the rpath baked in at link time; Windows needs the
library directory on PATH (MSYS) or handed to the caller (native). The
returned environment is never exported; callers pass it to their process
launcher.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from rustcfg_tooling.platform.profile import PlatformProfile
from rustcfg_tooling.toolchain.stage import Stage, host_lib_dir, stage_lib_path

if TYPE_CHECKING:
    from rustcfg_tooling.config import BuildOptions

log = logging.getLogger(__name__)

MEMCHECK_ERROR_EXITCODE = 100
ARCH_SUPPRESSIONS = "x86.supp"
WINE = "wine"


def os_suppression_files(suppressions_dir: Path, ostype: str) -> list[Path]:
    """Existing <ostype>.supp* files; none is fine."""
    if not suppressions_dir.is_dir():
        return []
    return sorted(suppressions_dir.glob(f"{ostype}.supp*"))


def memcheck_command(options: BuildOptions) -> tuple[str, ...]:
    """valgrind argv with leak checking and suppressions, or () when no checker is configured."""
    if not options.valgrind:
        return ()
    supp_dir = options.suppressions_dir
    os_supp = os_suppression_files(supp_dir, options.ostype)
    log.debug("OS suppression files for %s: %s", options.ostype, os_supp)
    return (
        options.valgrind,
        "--leak-check=full",
        f"--error-exitcode={MEMCHECK_ERROR_EXITCODE}",
        "--quiet",
        f"--suppressions={(supp_dir / ARCH_SUPPRESSIONS).as_posix()}",
        *(f"--suppressions={p.as_posix()}" for p in os_supp),
    )


@dataclass(frozen=True)
class RunWrapper:
    prefix: tuple[str, ...] = ()
    env: tuple[tuple[str, str], ...] = ()
    library_dir: Path | None = None

    def argv(self, command: list[str]) -> list[str]:
        return [*self.prefix, *command]

    def process_env(self, base: Mapping[str, str]) -> dict[str, str]:
        """base overlaid with this wrapper's variables; base is not modified."""
        out = dict(base)
        out.update(self.env)
        return out

    def render(self, command: list[str]) -> str:
        """Shell form, e.g. PATH="dir:$PATH" prog args."""
        assigns = [f'{k}="{v}"' for k, v in self.env]
        return " ".join([*assigns, shlex.join(self.argv(command))])


class RunWrapperSelector:
    """Picks the run prefix for the active profile."""

    def __init__(self, profile: PlatformProfile, options: BuildOptions) -> None:
        self.profile = profile
        self.options = options
        self._memcheck = memcheck_command(options)

    def _wrap(self, lib_dir: Path, *, test: bool) -> RunWrapper:
        env = self.profile.runtime_env
        memcheck = self._memcheck if test else ()
        if self.profile.mingw_cross:
            return RunWrapper(prefix=(*memcheck, WINE), env=env)
        if self.profile.is_unixy:
            return RunWrapper(prefix=memcheck, env=env)
        if self.options.msystem:
            inherited = self.options.inherited_path or "$PATH"
            env = (*env, ("PATH", f"{lib_dir.as_posix()}:{inherited}"))
        return RunWrapper(env=env, library_dir=lib_dir)

    def run_target(self, stage: Stage) -> RunWrapper:
        """Wrapper for running a stage's compiler or tools."""
        o = self.options
        return self._wrap(host_lib_dir(o.build_dir, stage, o.host_triple, o.libdir), test=False)

    def run_test(self, stage: Stage, triple: str) -> RunWrapper:
        """Wrapper for a test binary built by `stage` for `triple`."""
        o = self.options
        lib = stage_lib_path(o.build_dir, stage, triple, o.host_triple, o.libdir)
        return self._wrap(lib, test=True)
