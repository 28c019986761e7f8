"""`rustcfg host-arch` and `rustcfg testlib` — single-value platform queries."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from rustcfg_tooling.config import load_build_options
from rustcfg_tooling.errors import ConfigurationError
from rustcfg_tooling.platform.triple import host_arch, parse_triple
from rustcfg_tooling.toolchain.stage import Stage, stage_lib_path


def run_host_arch_argv(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    if not argv:
        print("Usage: rustcfg host-arch <triple>...", file=sys.stderr)
        sys.exit(1)
    rc = 0
    for t in argv:
        try:
            print(f"{t} {host_arch(t)}")
        except ConfigurationError as e:
            print(f"❌ {e}", file=sys.stderr)
            rc = 1
    sys.exit(rc)


def run_testlib_argv(argv: list[str] | None = None) -> None:
    """Print <build>/<triple>/<stage>/<libdir>/rustc/<host>/<libdir>."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    ap = argparse.ArgumentParser(prog="rustcfg testlib", description="Stage test library path")
    ap.add_argument("stage", help="stage0..stage3 (or 0..3)")
    ap.add_argument("triple", help="target triple")
    ap.add_argument("--config", type=Path, default=None, help="YAML build config")
    ap.add_argument("--host-triple", default=None, help="Host triple (default: from config)")
    args = ap.parse_args(argv)
    try:
        stage = Stage.parse(args.stage)
        env = dict(os.environ)
        if args.config is None:
            env.setdefault("CFG_TARGET_TRIPLES", args.triple)
        options = load_build_options(args.config, env=env)
        host = parse_triple(args.host_triple or options.host_triple).raw
        triple = parse_triple(args.triple).raw
        print(stage_lib_path(options.build_dir, stage, triple, host, options.libdir))
    except (ConfigurationError, OSError) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0)
