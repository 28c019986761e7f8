"""Main CLI entry point for rustcfg tooling."""

import sys

from rustcfg_tooling.cli import platform_cmd, resolve_cmd


def _usage() -> None:
    print("Usage: rustcfg <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print(
        "  resolve [--config F] [--triple T]  - Print compile/link/assemble/run templates",
        file=sys.stderr,
    )
    print(
        "  host-arch <triple>...              - Print the host arch of each triple",
        file=sys.stderr,
    )
    print(
        "  testlib <stage> <triple>           - Print the test library directory for a stage",
        file=sys.stderr,
    )


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        _usage()
        sys.exit(1)

    command = sys.argv[1]
    rest = sys.argv[2:]

    if command == "resolve":
        resolve_cmd.run_resolve_argv(rest)
    elif command == "host-arch":
        platform_cmd.run_host_arch_argv(rest)
    elif command == "testlib":
        platform_cmd.run_testlib_argv(rest)
    elif command in ("-h", "--help", "help"):
        _usage()
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
