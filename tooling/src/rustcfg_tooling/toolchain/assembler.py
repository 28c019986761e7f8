"""Assembler pipeline: cpp SRC | llvm-mc -assemble -filetype=obj -triple=T -o=OUT.

llvm-mc is used instead of the system assembler because it supports the
.cfi pseudo-ops on Darwin.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AssemblerInvocation:
    triple: str
    cpp: str
    llvm_mc: str

    def preprocess_argv(self, source: str | Path) -> list[str]:
        return [self.cpp, str(source)]

    def assemble_argv(self, output: str | Path) -> list[str]:
        return [
            self.llvm_mc,
            "-assemble",
            "-filetype=obj",
            f"-triple={self.triple}",
            f"-o={output}",
        ]

    def pipeline(self, source: str | Path, output: str | Path) -> list[list[str]]:
        return [self.preprocess_argv(source), self.assemble_argv(output)]

    def render(self, source: str | Path, output: str | Path) -> str:
        return " | ".join(shlex.join(argv) for argv in self.pipeline(source, output))


def build_assembler(triple: str, cpp: str, llvm_mc: str) -> AssemblerInvocation:
    return AssemblerInvocation(triple=triple, cpp=cpp, llvm_mc=llvm_mc)
