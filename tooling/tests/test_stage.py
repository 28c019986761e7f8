"""Tests for rustcfg_tooling.toolchain.stage."""

from pathlib import Path

import pytest

from rustcfg_tooling.errors import UnknownStageError
from rustcfg_tooling.toolchain.stage import Stage, host_lib_dir, stage_lib_path

TRIPLE = "x86_64-unknown-linux-gnu"


class TestStageParse:
    @pytest.mark.parametrize("value", ["stage2", "2", 2, " Stage2 ", Stage.STAGE2])
    def test_accepts_names_and_numbers(self, value) -> None:
        assert Stage.parse(value) is Stage.STAGE2

    @pytest.mark.parametrize("value", ["stage4", "", "final", "-1"])
    def test_rejects_unknown(self, value) -> None:
        with pytest.raises(UnknownStageError):
            Stage.parse(value)

    def test_number(self) -> None:
        assert [s.number for s in Stage] == [0, 1, 2, 3]


class TestFromSpecifier:
    def test_finds_marker(self) -> None:
        assert Stage.from_specifier("check-stage2-std") is Stage.STAGE2

    def test_ascending_order_wins(self) -> None:
        assert Stage.from_specifier("stage3-from-stage1") is Stage.STAGE1

    def test_no_marker_is_an_error(self) -> None:
        with pytest.raises(UnknownStageError, match="No stage marker"):
            Stage.from_specifier("check-std")


class TestStageLibPath:
    def test_layout(self, tmp_path: Path) -> None:
        p = stage_lib_path(tmp_path, Stage.STAGE1, TRIPLE, TRIPLE, "lib")
        assert p == tmp_path / TRIPLE / "stage1" / "lib" / "rustc" / TRIPLE / "lib"

    def test_custom_libdir_appears_twice(self, tmp_path: Path) -> None:
        p = stage_lib_path(tmp_path, Stage.STAGE0, TRIPLE, "i686-unknown-linux-gnu", "lib64")
        assert p.parts[-1] == "lib64"
        assert p.parts[-4] == "lib64"
        assert p.parts[-2] == "i686-unknown-linux-gnu"

    def test_stages_differ_only_in_stage_segment(self, tmp_path: Path) -> None:
        paths = [stage_lib_path(tmp_path, s, TRIPLE, TRIPLE) for s in Stage]
        assert len(set(paths)) == 4
        idx = len(tmp_path.parts) + 1
        for p in paths:
            assert p.parts[:idx] == paths[0].parts[:idx]
            assert p.parts[idx + 1 :] == paths[0].parts[idx + 1 :]
        assert [p.parts[idx] for p in paths] == ["stage0", "stage1", "stage2", "stage3"]

    def test_host_lib_dir(self, tmp_path: Path) -> None:
        assert host_lib_dir(tmp_path, Stage.STAGE2, TRIPLE) == tmp_path / TRIPLE / "stage2" / "lib"
