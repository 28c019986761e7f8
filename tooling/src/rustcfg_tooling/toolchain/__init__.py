"""Toolchain command templates: compile, link, depend, assemble, run."""

from .assembler import AssemblerInvocation, build_assembler
from .compiler import (
    COMPILERS,
    CompileCommand,
    CompilerFamily,
    CompilerProfile,
    DependCommand,
    LinkCommand,
    build_compile_command,
    build_depend_command,
    build_link_command,
    select_compiler,
)
from .run_wrapper import RunWrapper, RunWrapperSelector, memcheck_command
from .stage import Stage, host_lib_dir, stage_lib_path

__all__ = [
    "COMPILERS",
    "AssemblerInvocation",
    "CompileCommand",
    "CompilerFamily",
    "CompilerProfile",
    "DependCommand",
    "LinkCommand",
    "RunWrapper",
    "RunWrapperSelector",
    "Stage",
    "build_assembler",
    "build_compile_command",
    "build_depend_command",
    "build_link_command",
    "host_lib_dir",
    "memcheck_command",
    "select_compiler",
    "stage_lib_path",
]
