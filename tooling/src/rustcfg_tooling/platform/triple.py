"""Target triple parsing (arch-vendor-os[-abi]).

Only the architecture segment drives flag selection; i686 is reported as
i386 so it shares the i386 per-arch flags.
"""

from __future__ import annotations

from dataclasses import dataclass

from rustcfg_tooling.errors import InvalidTripleError

ARCH_ALIASES: dict[str, str] = {"i686": "i386"}


@dataclass(frozen=True)
class Triple:
    """A parsed target triple. Immutable once parsed."""

    raw: str
    arch: str
    vendor: str
    os: str
    abi: str = ""

    @property
    def host_arch(self) -> str:
        return ARCH_ALIASES.get(self.arch, self.arch)

    def __str__(self) -> str:
        return self.raw


def parse_triple(text: str) -> Triple:
    """Split a triple into its segments. Raises InvalidTripleError when malformed."""
    raw = text.strip()
    parts = raw.split("-")
    if len(parts) < 2 or not all(parts):
        msg = f"Malformed target triple: {text!r} (expected arch-vendor-os[-abi])"
        raise InvalidTripleError(msg)
    return Triple(
        raw=raw,
        arch=parts[0],
        vendor=parts[1],
        os=parts[2] if len(parts) > 2 else "",
        abi="-".join(parts[3:]),
    )


def host_arch(text: str) -> str:
    """Architecture segment of a triple, e.g. i686-unknown-linux -> i386."""
    return parse_triple(text).host_arch
