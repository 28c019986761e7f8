"""Bootstrap stages and their library directories.

Each stage installs its compiler under <build>/<triple>/stageN/<libdir>; the
libraries it builds for a target live one level deeper in
rustc/<host triple>/<libdir>.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from rustcfg_tooling.errors import UnknownStageError


class Stage(str, Enum):
    STAGE0 = "stage0"
    STAGE1 = "stage1"
    STAGE2 = "stage2"
    STAGE3 = "stage3"

    @property
    def directory(self) -> str:
        return self.value

    @property
    def number(self) -> int:
        return int(self.value[-1])

    @classmethod
    def parse(cls, value: str | int | Stage) -> Stage:
        """Parse stage0..stage3 or 0..3. Raises UnknownStageError otherwise."""
        if isinstance(value, Stage):
            return value
        s = str(value).strip().lower()
        if s.isdigit():
            s = f"stage{s}"
        try:
            return cls(s)
        except ValueError:
            msg = f"Unknown stage: {value!r} (expected stage0..stage3)"
            raise UnknownStageError(msg) from None

    @classmethod
    def from_specifier(cls, specifier: str) -> Stage:
        """First stage marker found in a compound name, e.g. check-stage2-std -> STAGE2.

        Markers are tried in ascending order; no marker is an error.
        """
        for stage in cls:
            if stage.value in specifier:
                return stage
        msg = f"No stage marker (stage0..stage3) in {specifier!r}"
        raise UnknownStageError(msg)


def stage_lib_path(
    build_dir: Path,
    stage: Stage,
    triple: str,
    host_triple: str,
    libdir: str = "lib",
) -> Path:
    """<build_dir>/<triple>/<stageN>/<libdir>/rustc/<host_triple>/<libdir>"""
    return build_dir / triple / stage.directory / libdir / "rustc" / host_triple / libdir


def host_lib_dir(build_dir: Path, stage: Stage, host_triple: str, libdir: str = "lib") -> Path:
    """Libraries of the stage's own compiler: <build_dir>/<host_triple>/<stageN>/<libdir>"""
    return build_dir / host_triple / stage.directory / libdir
