"""Default path layout for a bootstrap build tree. All paths relative to project_root."""

from __future__ import annotations

from typing import Any

# rustc-style default layout; override via the `layout` section of the config file.
DEFAULT_LAYOUT: dict[str, str] = {
    "build_dir": ".",
    "src_dir": ".",
    "libdir": "lib",
    "suppressions_dir": "src/etc",
}


def resolve_layout(layout: dict[str, Any] | None) -> dict[str, str]:
    """Return layout dict with defaults filled. Unknown keys are dropped."""
    if layout is None:
        return dict(DEFAULT_LAYOUT)
    out = dict(DEFAULT_LAYOUT)
    out.update({k: str(v) for k, v in layout.items() if k in out and v is not None})
    return out
