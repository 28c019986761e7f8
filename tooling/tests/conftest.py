"""Pytest fixtures for rustcfg tooling tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from rustcfg_tooling.config import (
    ENV_KEYS,
    LAYOUT_ENV_KEYS,
    BuildOptions,
    build_options_from_mapping,
)

LINUX_TRIPLES = ["x86_64-unknown-linux-gnu", "i686-unknown-linux-gnu"]


@pytest.fixture
def make_options(tmp_path: Path) -> Callable[..., BuildOptions]:
    """BuildOptions factory rooted at tmp_path. Kwargs override config keys; env= sets env."""

    def _make(env: dict[str, str] | None = None, **overrides: Any) -> BuildOptions:
        data: dict[str, Any] = {"target_triples": list(LINUX_TRIPLES), "c_compiler": "clang"}
        data.update(overrides)
        return build_options_from_mapping(data, env=env or {}, project_root=tmp_path)

    return _make


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop CFG_* and MSYS variables the CLI would otherwise pick up from the environment."""
    for key in [*ENV_KEYS, *LAYOUT_ENV_KEYS, "MSYSTEM", "RUST_THREADS"]:
        monkeypatch.delenv(key, raising=False)
