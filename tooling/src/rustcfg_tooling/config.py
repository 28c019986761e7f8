"""Build options loading for the configuration resolver.

Config YAML format (every key optional except target_triples):
- target_triples: list (or space-separated string) of triples to configure
- host_triple: triple of the build host (default: first target triple)
- ostype: OS identifier, e.g. unknown-linux-gnu (default: host triple minus arch)
- cputype: host CPU, e.g. x86_64 (default: host triple arch)
- c_compiler: clang | gcc
- perf, perf_with_logfd, valgrind: debug/measurement tools
- mingw_cross, disable_optimize_cxx: booleans
- llvm_mc: map host triple -> llvm-mc binary
- layout: build_dir, src_dir, libdir, suppressions_dir (relative to project root)

CFG_* environment variables override the file (CFG_OSTYPE, CFG_C_COMPILER, ...).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from rustcfg_tooling.errors import ConfigurationError
from rustcfg_tooling.platform.layout import resolve_layout

log = logging.getLogger(__name__)

ENV_KEYS: dict[str, str] = {
    "CFG_TARGET_TRIPLES": "target_triples",
    "CFG_HOST_TRIPLE": "host_triple",
    "CFG_OSTYPE": "ostype",
    "CFG_CPUTYPE": "cputype",
    "CFG_C_COMPILER": "c_compiler",
    "CFG_PERF": "perf",
    "CFG_PERF_WITH_LOGFD": "perf_with_logfd",
    "CFG_VALGRIND": "valgrind",
    "CFG_ENABLE_MINGW_CROSS": "mingw_cross",
    "CFG_DISABLE_OPTIMIZE_CXX": "disable_optimize_cxx",
}
LAYOUT_ENV_KEYS: dict[str, str] = {
    "CFG_BUILD_DIR": "build_dir",
    "CFG_SRC_DIR": "src_dir",
    "CFG_LIBDIR": "libdir",
}
BOOL_KEYS = frozenset({"perf_with_logfd", "mingw_cross", "disable_optimize_cxx"})
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class BuildOptions:
    """Configuration-time inputs. Read once; never mutated."""

    target_triples: tuple[str, ...]
    host_triple: str
    ostype: str
    cputype: str
    c_compiler: str | None = None
    perf: str | None = None
    perf_with_logfd: bool = False
    valgrind: str | None = None
    mingw_cross: bool = False
    disable_optimize_cxx: bool = False
    msystem: str | None = None
    inherited_path: str = ""
    rust_threads: str | None = None
    llvm_mc: tuple[tuple[str, str], ...] = ()
    project_root: Path = field(default_factory=Path.cwd)
    layout: tuple[tuple[str, str], ...] = field(
        default_factory=lambda: tuple(resolve_layout(None).items())
    )

    def _layout(self, key: str) -> str:
        return dict(self.layout)[key]

    @property
    def build_dir(self) -> Path:
        return self.project_root / self._layout("build_dir")

    @property
    def src_dir(self) -> Path:
        return self.project_root / self._layout("src_dir")

    @property
    def libdir(self) -> str:
        return self._layout("libdir")

    @property
    def suppressions_dir(self) -> Path:
        return self.src_dir / self._layout("suppressions_dir")

    def llvm_mc_for(self, host_triple: str) -> str:
        return dict(self.llvm_mc).get(host_triple, "llvm-mc")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() not in _FALSE_STRINGS


def _as_triples(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    if not isinstance(value, (list, tuple)) or not all(isinstance(t, str) for t in value):
        msg = f"target_triples must be a list or space-separated string, got {value!r}"
        raise ConfigurationError(msg)
    return tuple(t.strip() for t in value if t.strip())


def _as_pairs(value: Any, key: str) -> tuple[tuple[str, str], ...]:
    if value is None:
        return ()
    if not isinstance(value, Mapping):
        msg = f"{key} must be a mapping, got {type(value).__name__}"
        raise ConfigurationError(msg)
    pairs = []
    for k, v in value.items():
        if v is None:
            continue
        if not isinstance(k, str) or not isinstance(v, str):
            msg = f"{key}: expected string keys and values, got {k!r}: {v!r}"
            raise ConfigurationError(msg)
        pairs.append((k, v))
    return tuple(pairs)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load the YAML config file; an empty file is an empty config."""
    with config_path.open() as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in {config_path}: {e}"
            raise ConfigurationError(msg) from e
    if not isinstance(data, dict):
        msg = f"Config file must contain a mapping: {config_path}"
        raise ConfigurationError(msg)
    return data


def build_options_from_mapping(
    data: Mapping[str, Any],
    env: Mapping[str, str] | None = None,
    project_root: Path | None = None,
) -> BuildOptions:
    """Merge config data with env overrides (env wins) into BuildOptions."""
    env = env if env is not None else {}
    merged: dict[str, Any] = dict(data)
    for env_key, key in ENV_KEYS.items():
        if env_key in env:
            merged[key] = env[env_key]
    layout_data = dict(_as_pairs(merged.get("layout"), "layout"))
    for env_key, key in LAYOUT_ENV_KEYS.items():
        if env.get(env_key):
            layout_data[key] = env[env_key]

    triples = _as_triples(merged.get("target_triples"))
    if not triples:
        msg = "No target triples configured (target_triples / CFG_TARGET_TRIPLES)"
        raise ConfigurationError(msg)
    host_triple = _optional_str(merged.get("host_triple")) or triples[0]
    host_parts = host_triple.split("-", 1)
    ostype = _optional_str(merged.get("ostype")) or (host_parts[1] if len(host_parts) > 1 else "")
    cputype = _optional_str(merged.get("cputype")) or host_parts[0]

    opts = BuildOptions(
        target_triples=triples,
        host_triple=host_triple,
        ostype=ostype,
        cputype=cputype,
        c_compiler=_optional_str(merged.get("c_compiler")),
        perf=_optional_str(merged.get("perf")),
        perf_with_logfd=_as_bool(merged.get("perf_with_logfd")),
        valgrind=_optional_str(merged.get("valgrind")),
        mingw_cross=_as_bool(merged.get("mingw_cross")),
        disable_optimize_cxx=_as_bool(merged.get("disable_optimize_cxx")),
        msystem=_optional_str(env.get("MSYSTEM")),
        inherited_path=env.get("PATH", ""),
        rust_threads=_optional_str(env.get("RUST_THREADS")),
        llvm_mc=_as_pairs(merged.get("llvm_mc"), "llvm_mc"),
        project_root=(project_root or Path.cwd()).resolve(),
        layout=tuple(resolve_layout(layout_data).items()),
    )
    log.debug("Build options: %s", opts)
    return opts


def load_build_options(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    project_root: Path | None = None,
) -> BuildOptions:
    """Load BuildOptions from an optional YAML file plus environment.

    project_root defaults to the config file's parent, else cwd.
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        data = load_config_file(config_path)
        if project_root is None:
            project_root = config_path.parent
    return build_options_from_mapping(data, env=env, project_root=project_root)
