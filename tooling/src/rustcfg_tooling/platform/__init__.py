"""Platform detection: target triples, OS family classification and platform profiles."""

from .layout import DEFAULT_LAYOUT, resolve_layout
from .profile import (
    OsFamily,
    PlatformProfile,
    classify_os,
    select_platform_profile,
)
from .triple import Triple, host_arch, parse_triple

__all__ = [
    "DEFAULT_LAYOUT",
    "OsFamily",
    "PlatformProfile",
    "Triple",
    "classify_os",
    "host_arch",
    "parse_triple",
    "resolve_layout",
    "select_platform_profile",
]
