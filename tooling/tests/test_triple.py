"""Tests for rustcfg_tooling.platform.triple."""

import pytest

from rustcfg_tooling.errors import InvalidTripleError
from rustcfg_tooling.platform.triple import host_arch, parse_triple


class TestHostArch:
    def test_i686_maps_to_i386(self) -> None:
        assert host_arch("i686-unknown-linux") == "i386"
        assert host_arch("i686-pc-mingw32") == "i386"

    def test_other_arches_are_first_segment(self) -> None:
        assert host_arch("x86_64-apple-darwin") == "x86_64"
        assert host_arch("x86_64-unknown-freebsd") == "x86_64"
        assert host_arch("arm-linux-androideabi") == "arm"

    def test_no_other_normalization(self) -> None:
        assert host_arch("i586-mingw32msvc") == "i586"


class TestParseTriple:
    def test_segments(self) -> None:
        t = parse_triple("x86_64-unknown-linux-gnu")
        assert (t.arch, t.vendor, t.os, t.abi) == ("x86_64", "unknown", "linux", "gnu")
        assert str(t) == "x86_64-unknown-linux-gnu"

    def test_two_segment_triple(self) -> None:
        t = parse_triple("i586-mingw32msvc")
        assert t.vendor == "mingw32msvc"
        assert t.os == ""

    @pytest.mark.parametrize("bad", ["", "x86_64", "x86_64--linux", "-apple-darwin"])
    def test_malformed_raises(self, bad: str) -> None:
        with pytest.raises(InvalidTripleError):
            parse_triple(bad)

    def test_immutable(self) -> None:
        t = parse_triple("x86_64-apple-darwin")
        with pytest.raises(AttributeError):
            t.arch = "i386"  # type: ignore[misc]
