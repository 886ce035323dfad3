"""Command line interface: filter kubectl contexts and run commands on them."""

from __future__ import annotations

import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field

from kxctl.client import KxctlError, new_client
from kxctl.filter import filter_contexts

VERSION = "dev"

STATUS_FIELD_SELECTOR = "status.phase!=Running,status.phase!=Succeeded"

HELP_TEXT = """\
kxctl - Kubernetes Context Control

Usage:
  kxctl [command] [flags] [-- kubectl_command]

Commands:
  list        List available contexts
  exec        Execute kubectl command on filtered contexts
  status      Show pods not in Running or Succeeded state
  version     Display version information
  help        Display help information

Notes:
  - No command provided: shows this help information
  - Leading flags without command: treated as 'exec'

Flags:
  -i, --include pattern   Include contexts matching pattern (can be used multiple times)
  -e, --exclude pattern   Exclude contexts matching pattern (can be used multiple times)
  -g, --grep pattern      Filter command output to lines matching pattern
  -t, --timeout duration  Set timeout for kubectl commands (e.g. 30s, 1m, 2m30s)
  -f, --force             Force execution of write operations
  -A, --all-namespaces    Show resources across all namespaces (status command)
  -h, --help              Display this help information

Examples:
  # List all contexts
  kxctl list

  # List contexts matching 'prod'
  kxctl list -i prod

  # Run a command on all contexts
  kxctl exec -- get pods

  # Run a command on contexts matching a pattern
  kxctl exec -i production -- get pods

  # Run a command excluding contexts matching a pattern
  kxctl exec -e staging -- get pods

  # Shorthand syntax (starting with flags implies 'exec')
  kxctl -i prod -- get pods

  # Run a write operation with force flag
  kxctl exec -f -i prod -- apply -f deployment.yaml

  # Show problematic pods in the current namespace
  kxctl status

  # Show problematic pods across all namespaces
  kxctl status -A

  # Show problematic pods with additional kubectl args
  kxctl status -- -o json

  # Show problematic pods across all namespaces with custom output format
  kxctl status -A -- -o custom-columns=NAME:.metadata.name,STATUS:.status.phase

  # Execute commands with a timeout (useful for slow or unresponsive clusters)
  kxctl exec -t 30s -- get pods

  # Filter kubectl output to only show lines matching a pattern
  kxctl exec -- get pods -A | grep stack1

  # Filter kubectl output with pipe-like syntax using the --grep flag
  kxctl exec -g "stack1|stack2" -- get pods -A
"""

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?(ns|us|µs|μs|ms|s|m|h)")


@dataclass
class CommandFlags:
    """Options shared by the list, exec and status commands."""

    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    force: bool = False
    all_namespaces: bool = False
    timeout: float = 0.0
    grep: str = ""


def parse_duration(text: str) -> float:
    """Parse a duration such as ``30s``, ``1m`` or ``2m30s`` into seconds.

    Accepts the units ns, us, ms, s, m and h, decimal fractions, several
    components and an optional sign. Raises ValueError on anything else.
    """
    body = text
    sign = 1.0
    if body and body[0] in "+-":
        sign = -1.0 if body[0] == "-" else 1.0
        body = body[1:]
    if body == "0":
        return 0.0
    if not body:
        raise ValueError(f"invalid duration {text!r}")

    total = 0.0
    pos = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None or not (match[1] or match[2]):
            raise ValueError(f"invalid duration {text!r}")
        value = float(f"{match[1] or '0'}.{match[2] or '0'}")
        total += value * _UNIT_SECONDS[match[3]]
        pos = match.end()
    return sign * total


def _take_value(args: Sequence[str], index: int, name: str) -> str:
    if index + 1 >= len(args) or args[index + 1].startswith("-"):
        raise KxctlError(f"{name} flag requires a value")
    return args[index + 1]


def parse_flags(args: Sequence[str]) -> CommandFlags:
    """Parse command flags; arguments that are not flags are ignored."""
    flags = CommandFlags()
    tokens = iter(enumerate(args))
    for index, arg in tokens:
        if arg in ("-i", "--include"):
            flags.include.append(_take_value(args, index, "include"))
            next(tokens)
        elif arg in ("-e", "--exclude"):
            flags.exclude.append(_take_value(args, index, "exclude"))
            next(tokens)
        elif arg in ("-g", "--grep"):
            flags.grep = _take_value(args, index, "grep")
            next(tokens)
        elif arg in ("-t", "--timeout"):
            value = _take_value(args, index, "timeout")
            try:
                flags.timeout = parse_duration(value)
            except ValueError:
                raise KxctlError(f"invalid timeout value: {value}") from None
            next(tokens)
        elif arg in ("-f", "--force"):
            flags.force = True
        elif arg in ("-A", "--all-namespaces"):
            flags.all_namespaces = True
        elif arg.startswith("-"):
            raise KxctlError(f"unknown flag: {arg}")
    return flags


def split_exec_args(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split exec arguments into (flag arguments, kubectl arguments).

    Everything after ``--`` goes to kubectl. Without ``--``, the leading
    flags (and the value following a short flag) are taken as flags and the
    rest as the kubectl command.
    """
    args = list(args)
    if "--" in args:
        cut = args.index("--")
        return args[:cut], args[cut + 1 :]

    flag_args: list[str] = []
    index = 0
    while index < len(args) and args[index].startswith("-"):
        arg = args[index]
        flag_args.append(arg)
        if (
            not arg.startswith("--")
            and len(arg) == 2
            and index + 1 < len(args)
            and not args[index + 1].startswith("-")
        ):
            flag_args.append(args[index + 1])
            index += 1
        index += 1
    return flag_args, args[index:]


def print_help() -> None:
    """Print the usage text."""
    print(HELP_TEXT, end="")


def run_version() -> None:
    """Print the version."""
    print(f"kxctl version {VERSION}")


def _selected_contexts(flags: CommandFlags):
    try:
        client = new_client()
    except KxctlError as exc:
        raise KxctlError(f"failed to create kubernetes client: {exc}") from exc
    selected = filter_contexts(client.contexts, flags.include, flags.exclude)
    if not selected:
        raise KxctlError("no contexts match the provided filters")
    return client, selected


def run_list(args: Sequence[str]) -> None:
    """Print the contexts that pass the filters."""
    flags = parse_flags(args)
    _, selected = _selected_contexts(flags)
    for name in selected:
        print(name)


def run_exec(args: Sequence[str]) -> None:
    """Run a kubectl command in every selected context, or list them."""
    flag_args, kubectl_args = split_exec_args(args)
    flags = parse_flags(flag_args)
    client, selected = _selected_contexts(flags)
    if not kubectl_args:
        for name in selected:
            print(name)
        return
    client.execute_command(kubectl_args, selected, flags.force, flags.timeout, flags.grep)


def run_status(args: Sequence[str]) -> None:
    """Show pods that are neither Running nor Succeeded in each context."""
    args = list(args)
    if "--" in args:
        cut = args.index("--")
        flag_args, extra = args[:cut], args[cut + 1 :]
    else:
        flag_args, extra = args, []

    flags = parse_flags(flag_args)
    client, selected = _selected_contexts(flags)

    kubectl_args = ["get", "pods", "--field-selector", STATUS_FIELD_SELECTOR]
    if flags.all_namespaces:
        kubectl_args.append("--all-namespaces")
    kubectl_args.extend(extra)
    client.execute_command(kubectl_args, selected, False, flags.timeout, flags.grep)


def run(argv: Sequence[str] | None = None) -> None:
    """Dispatch the command in ``argv`` (program name excluded)."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        print_help()
        return

    command, rest = argv[0], argv[1:]
    if command in ("--help", "-h"):
        print_help()
        return
    if command.startswith("-"):
        run_exec(argv)
        return

    if command == "version":
        run_version()
    elif command == "help":
        print_help()
    elif command == "list":
        run_list(rest)
    elif command == "exec":
        run_exec(rest)
    elif command == "status":
        run_status(rest)
    else:
        print(f"Unknown command: {command}\n", file=sys.stderr)
        print_help()
        raise KxctlError(f"unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point; returns the process exit status."""
    try:
        run(argv)
    except KxctlError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())