"""Resolve BuildOptions into the per-triple toolchain table.

Resolution runs once. Every fatal check (triples, OS, compiler) happens
before any template is built, so callers get either the full table or an
exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from rustcfg_tooling.config import BuildOptions
from rustcfg_tooling.platform.profile import (
    PlatformProfile,
    classify_os,
    select_platform_profile,
)
from rustcfg_tooling.platform.triple import Triple, parse_triple
from rustcfg_tooling.toolchain.assembler import AssemblerInvocation, build_assembler
from rustcfg_tooling.toolchain.compiler import (
    CompileCommand,
    CompilerProfile,
    DependCommand,
    LinkCommand,
    build_compile_command,
    build_depend_command,
    build_link_command,
    select_compiler,
)
from rustcfg_tooling.toolchain.run_wrapper import RunWrapper, RunWrapperSelector
from rustcfg_tooling.toolchain.stage import Stage

log = logging.getLogger(__name__)

# Placeholders used when rendering templates for display.
OUT = "{output}"
SRC = "{source}"
INPUTS = "{inputs}"
DEF_FILE = "{def_file}"
LIB_NAME = "{lib_name}"
PROGRAM = "{program}"


@dataclass(frozen=True)
class TargetToolchain:
    """Immutable command templates for one target triple."""

    triple: Triple
    compile: CompileCommand
    link: LinkCommand
    depend: DependCommand
    assemble: AssemblerInvocation
    runner: RunWrapperSelector

    def run_test(self, stage: Stage | str) -> RunWrapper:
        return self.runner.run_test(Stage.parse(stage), self.triple.raw)


@dataclass(frozen=True)
class ResolvedConfiguration:
    options: BuildOptions
    profile: PlatformProfile
    compiler: CompilerProfile
    targets: Mapping[str, TargetToolchain]
    runner: RunWrapperSelector

    def target(self, triple: str) -> TargetToolchain:
        try:
            return self.targets[triple]
        except KeyError:
            configured = ", ".join(self.targets)
            msg = f"Triple {triple!r} is not configured (configured: {configured})"
            raise KeyError(msg) from None

    def run_target(self, stage: Stage | str) -> RunWrapper:
        return self.runner.run_target(Stage.parse(stage))

    @staticmethod
    def _run_entry(wrapper: RunWrapper) -> dict[str, str]:
        entry = {"command": wrapper.render([PROGRAM])}
        if wrapper.library_dir is not None:
            entry["library_dir"] = wrapper.library_dir.as_posix()
        return entry

    @staticmethod
    def stage_directories() -> dict[str, str]:
        return {s.value: s.directory for s in Stage}

    def to_dict(self) -> dict[str, Any]:
        """Plain data view (placeholders in braces) for YAML/JSON output."""
        p = self.profile
        out: dict[str, Any] = {
            "os_family": p.family.value,
            "unixy": p.is_unixy,
            "windowsy": p.is_windowsy,
            "compiler": self.compiler.family.value,
            "lib_name": p.lib_name(LIB_NAME),
            "lib_glob": p.lib_glob(LIB_NAME),
            "def_suffix": p.def_suffix,
            "exe_suffix": p.exe_suffix,
            "ld_env": p.ld_env,
            "dsymutil": list(p.dsymutil),
            "perf_tool": list(p.perf_tool),
            "pre_lib_flags": list(p.pre_lib_flags),
            "post_lib_flags": list(p.post_lib_flags),
            "libuv_link_flags": list(p.libuv_link_flags),
            "path_munge": list(p.path_munge),
            "llvm_build_env": dict(p.llvm_build_env),
            "stage_dirs": self.stage_directories(),
            "run": {s.value: self._run_entry(self.run_target(s)) for s in Stage},
            "targets": {},
        }
        for name, t in self.targets.items():
            out["targets"][name] = {
                "host_arch": t.triple.host_arch,
                "compile": t.compile.argv(OUT, SRC),
                "link": t.link.argv(OUT, [INPUTS], def_file=DEF_FILE, install_name=LIB_NAME),
                "depend": t.depend.argv(OUT, SRC),
                "assemble": t.assemble.render(SRC, OUT),
                "run_test": {s.value: self._run_entry(t.run_test(s)) for s in Stage},
            }
        return out


def resolve_configuration(options: BuildOptions) -> ResolvedConfiguration:
    """Validate options and build one TargetToolchain per declared triple."""
    triples = [parse_triple(t) for t in options.target_triples]
    host = parse_triple(options.host_triple)
    log.info("cfg: build host is %s (%s)", host.raw, host.host_arch)
    for t in triples:
        log.info("cfg: host for %s is %s", t.raw, t.host_arch)
    family = classify_os(options.ostype)
    profile = select_platform_profile(family, options)
    compiler = select_compiler(options.c_compiler)
    runner = RunWrapperSelector(profile, options)
    llvm_mc = options.llvm_mc_for(host.raw)

    targets: dict[str, TargetToolchain] = {}
    for t in triples:
        targets[t.raw] = TargetToolchain(
            triple=t,
            compile=build_compile_command(t, profile, compiler),
            link=build_link_command(t, profile, compiler),
            depend=build_depend_command(profile, compiler),
            assemble=build_assembler(t.raw, compiler.cpp, llvm_mc),
            runner=runner,
        )
    return ResolvedConfiguration(
        options=options,
        profile=profile,
        compiler=compiler,
        targets=MappingProxyType(targets),
        runner=runner,
    )
