"""Tests for rustcfg_tooling.resolver."""

from __future__ import annotations

import logging

import pytest

from rustcfg_tooling.errors import InvalidTripleError, UnknownOsError, UnsupportedCompilerError
from rustcfg_tooling.platform.profile import OsFamily
from rustcfg_tooling.resolver import resolve_configuration
from rustcfg_tooling.toolchain.stage import Stage

X64 = "x86_64-unknown-linux-gnu"
I686 = "i686-unknown-linux-gnu"


class TestResolveConfiguration:
    def test_one_toolchain_per_triple(self, make_options) -> None:
        r = resolve_configuration(make_options())
        assert list(r.targets) == [X64, I686]
        assert r.profile.family is OsFamily.LINUX
        assert "-m64" in r.target(X64).compile.argv("o", "s")
        assert "-m32" in r.target(I686).compile.argv("o", "s")
        assert r.target(I686).triple.host_arch == "i386"

    def test_table_is_read_only(self, make_options) -> None:
        r = resolve_configuration(make_options())
        with pytest.raises(TypeError):
            r.targets["arm-linux-androideabi"] = r.target(X64)  # type: ignore[index]

    def test_missing_compiler_is_fatal(self, make_options) -> None:
        with pytest.raises(UnsupportedCompilerError):
            resolve_configuration(make_options(c_compiler=None))

    def test_unknown_os_is_fatal(self, make_options) -> None:
        with pytest.raises(UnknownOsError):
            resolve_configuration(make_options(ostype="sun-solaris"))

    def test_bad_triple_is_fatal(self, make_options) -> None:
        with pytest.raises(InvalidTripleError):
            resolve_configuration(make_options(target_triples=[X64, "bogus"]))

    def test_bad_host_triple_is_fatal(self, make_options) -> None:
        with pytest.raises(InvalidTripleError):
            resolve_configuration(make_options(host_triple="bogus", ostype="unknown-linux-gnu"))

    def test_profile_is_hashable(self, make_options) -> None:
        r = resolve_configuration(make_options(ostype="unknown-freebsd"))
        assert hash(r.profile) == hash(r.profile)
        with pytest.raises(TypeError):
            r.profile.runtime_env["RUST_THREADS"] = "8"  # type: ignore[index]
        assert r.to_dict()["targets"][X64]["run_test"]["stage1"]["command"].startswith(
            'RUST_THREADS="1"'
        )

    def test_unknown_target_lookup(self, make_options) -> None:
        r = resolve_configuration(make_options())
        with pytest.raises(KeyError, match="not configured"):
            r.target("arm-linux-androideabi")

    def test_assembler_per_triple(self, make_options) -> None:
        r = resolve_configuration(make_options(llvm_mc={X64: "/opt/llvm/bin/llvm-mc"}))
        asm = r.target(I686).assemble
        assert asm.render("ctx.S", "ctx.o") == (
            "cpp ctx.S | /opt/llvm/bin/llvm-mc -assemble -filetype=obj "
            f"-triple={I686} -o=ctx.o"
        )
        assert asm.pipeline("ctx.S", "ctx.o")[0] == ["cpp", "ctx.S"]

    def test_run_test_uses_stage_lib_path(self, make_options) -> None:
        r = resolve_configuration(make_options(ostype="pc-mingw32"))
        w = r.target(I686).run_test("stage2")
        assert w.library_dir is not None
        assert w.library_dir.parts[-6:] == (I686, "stage2", "lib", "rustc", X64, "lib")

    def test_logs_cfg_lines(self, make_options, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO)
        resolve_configuration(make_options(disable_optimize_cxx=True))
        text = caplog.text
        assert f"cfg: host for {I686} is i386" in text
        assert "cfg: unix-y environment" in text
        assert "cfg: using clang" in text
        assert "cfg: disabling C++ optimization" in text


class TestToDict:
    def test_shape(self, make_options) -> None:
        data = resolve_configuration(make_options()).to_dict()
        assert data["os_family"] == "linux"
        assert data["unixy"] is True
        assert data["windowsy"] is False
        assert data["lib_name"] == "lib{lib_name}.so"
        assert data["ld_env"] == "LD_LIBRARY_PATH"
        assert data["stage_dirs"] == {s.value: s.value for s in Stage}
        t = data["targets"][I686]
        assert t["host_arch"] == "i386"
        assert t["compile"][-4:] == ["-c", "-o", "{output}", "{source}"]
        assert "-Wl,--export-dynamic,--dynamic-list={def_file}" in t["link"]
        assert t["run_test"]["stage1"] == {"command": "'{program}'"}
        assert data["run"]["stage2"] == {"command": "'{program}'"}

    def test_windows_reports_library_dir(self, make_options) -> None:
        data = resolve_configuration(make_options(ostype="pc-mingw32")).to_dict()
        run = data["run"]["stage1"]
        assert run["library_dir"].endswith(f"{X64}/stage1/lib")
        entry = data["targets"][I686]["run_test"]["stage2"]
        assert entry["library_dir"].endswith(f"{I686}/stage2/lib/rustc/{X64}/lib")
        assert entry["command"] == "'{program}'"
