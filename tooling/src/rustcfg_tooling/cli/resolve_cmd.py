"""`rustcfg resolve` — print the resolved toolchain table as YAML or JSON."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import yaml

from rustcfg_tooling.config import load_build_options
from rustcfg_tooling.errors import ConfigurationError
from rustcfg_tooling.resolver import resolve_configuration


def run_resolve_argv(argv: list[str] | None = None) -> None:
    """Parse argv, resolve configuration from --config plus CFG_* env, print it."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'rustcfg resolve'
    ap = argparse.ArgumentParser(
        prog="rustcfg resolve", description="Resolve toolchain command templates"
    )
    ap.add_argument("--config", type=Path, default=None, help="YAML build config")
    ap.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Root for layout paths (default: config dir, else cwd)",
    )
    ap.add_argument("--triple", default=None, help="Only print this target triple")
    ap.add_argument("--format", choices=("yaml", "json"), default="yaml")
    ap.add_argument("-v", "--verbose", action="store_true", help="Print cfg: lines to stderr")
    args = ap.parse_args(argv)
    sys.exit(run(args.config, args.project_root, args.triple, args.format, args.verbose))


def run(
    config: Path | None,
    project_root: Path | None = None,
    triple: str | None = None,
    fmt: str = "yaml",
    verbose: bool = False,
) -> int:
    """CLI entry: returns 0 on success, 1 on configuration error."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)
    try:
        options = load_build_options(config, env=os.environ, project_root=project_root)
        resolved = resolve_configuration(options)
        data = resolved.to_dict()
        if triple is not None:
            resolved.target(triple)
            data["targets"] = {triple: data["targets"][triple]}
    except (ConfigurationError, KeyError, OSError) as e:
        msg = e.args[0] if isinstance(e, KeyError) and e.args else e
        print(f"❌ {msg}", file=sys.stderr)
        return 1
    if fmt == "json":
        print(json.dumps(data, indent=2))
    else:
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    return 0
