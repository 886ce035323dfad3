# kxctl

Kubernetes context control: run one `kubectl` command against many contexts
in parallel, choosing the contexts by name.

`kxctl` reads your contexts from `kubectl config get-contexts -o name`, narrows
them with include and exclude patterns, then runs the given `kubectl` command
once per context, all at the same time. Each context's output is printed as
one block under a `Context: <name>` header, followed by a blank line.

## Installation

```
pip install .
```

`kubectl` must be on your `PATH`. The package has no dependencies beyond the
Python standard library (Python 3.10 or later).

## Usage

```
kxctl [command] [flags] [-- kubectl_command]
```

Commands:

| Command   | What it does                                          |
|-----------|-------------------------------------------------------|
| `list`    | Print the contexts that pass the filters              |
| `exec`    | Run a kubectl command on the filtered contexts        |
| `status`  | Show pods whose phase is neither Running nor Succeeded |
| `version` | Print the version                                     |
| `help`    | Print help                                            |

With no command, help is printed. If the first argument is a flag, the whole
command line is treated as `exec`. `exec` without a kubectl command just lists
the selected contexts.

Flags:

- `-i, --include pattern`: keep contexts matching the pattern (repeatable)
- `-e, --exclude pattern`: drop contexts matching the pattern (repeatable)
- `-g, --grep pattern`: keep only output lines matching the pattern
- `-t, --timeout duration`: per-context time limit, e.g. `30s`, `1m`, `2m30s`,
  `500ms`; units `ns`, `us`, `ms`, `s`, `m`, `h`
- `-f, --force`: allow write operations
- `-A, --all-namespaces`: add `--all-namespaces` (`status` command)
- `-h, --help`: print help

A flag value may not start with `-`. Everything after `--` is passed to
`kubectl` unchanged. With `exec` and no `--`, the leading flags are taken as
flags and the rest as the kubectl command.

`status` runs `kubectl get pods --field-selector
status.phase!=Running,status.phase!=Succeeded`, plus `--all-namespaces` with
`-A` and any arguments given after `--`.

### Patterns

A context pattern matches when the context name contains it. A pattern wrapped
in slashes, such as `/^prod-.*$/`, is a regular expression searched for in the
name; an invalid expression matches nothing. Include patterns are checked
first (any one must match, if there are any), then no exclude pattern may
match.

Grep patterns follow the same rules, and also accept `a|b`, which keeps lines
containing any of the alternatives.

### Write protection

Commands whose first kubectl argument is one of `apply`, `create`, `delete`,
`edit`, `patch`, `replace`, `scale`, `set`, `label`, `annotate`, `taint`,
`drain`, `cordon`, `uncordon`, `rollout` or `autoscale` are refused unless
`--force` is given.

### Errors

Errors are printed as `Error: <message>` on standard error and the command
exits with status 1: an unknown command or flag, a missing flag value, an
invalid timeout, no contexts matching the filters, or `kubectl` failing to list
contexts. A failure or timeout in a single context is reported on standard
error under that context's block and does not stop the others.

### Examples

```
kxctl list
kxctl list -i prod
kxctl exec -- get pods
kxctl exec -i production -e staging -- get pods
kxctl -i prod -- get pods
kxctl exec -f -i prod -- apply -f deployment.yaml
kxctl status -A
kxctl status -- -o json
kxctl exec -t 30s -- get pods
kxctl exec -g "stack1|stack2" -- get pods -A
```

## Library use

```python
from kxctl.client import KxctlError, new_client
from kxctl.filter import filter_contexts

client = new_client()
targets = filter_contexts(client.contexts, ["prod"], ["us"])
try:
    client.execute_command(["get", "pods"], targets, False, 30.0, "")
except KxctlError as exc:
    print(exc)
```

- `kxctl.filter`: `filter_contexts(contexts, include, exclude)` and
  `match_pattern(s, pattern)`.
- `kxctl.client`: `get_contexts()`, `new_client()`, the `Client` class with
  `execute_command(kubectl_args, contexts, force, timeout, grep_pattern)`
  (timeout in seconds, `0` for none), `is_write_operation(args)`,
  `matches_grep_pattern(line, pattern)` and the `KxctlError` exception.
- `kxctl.cli`: `main(argv=None)`, which returns the exit status,
  `parse_flags(args)`, `parse_duration(text)` and `split_exec_args(args)`.

## What it does not do

`kxctl` keeps no configuration of its own and does not talk to clusters
directly: every context name and every result comes from the `kubectl` on your
`PATH`.