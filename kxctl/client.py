"""Running kubectl against several contexts at once."""

from __future__ import annotations

import subprocess
import sys
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from kxctl.filter import match_pattern

KUBECTL = "kubectl"

WRITE_VERBS = frozenset(
    {
        "apply",
        "create",
        "delete",
        "edit",
        "patch",
        "replace",
        "scale",
        "set",
        "label",
        "annotate",
        "taint",
        "drain",
        "cordon",
        "uncordon",
        "rollout",
        "autoscale",
    }
)


class KxctlError(Exception):
    """Raised when a kubectl operation cannot be carried out."""


def get_contexts() -> list[str]:
    """Return the names of all contexts known to kubectl."""
    try:
        completed = subprocess.run(
            [KUBECTL, "config", "get-contexts", "-o", "name"],
            stdout=subprocess.PIPE,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise KxctlError(f"failed to get kubectl contexts: {exc}") from exc
    return _decode(completed.stdout).strip().split("\n")


def new_client() -> Client:
    """Create a client holding every available context."""
    return Client(get_contexts())


def is_write_operation(args: Sequence[str]) -> bool:
    """Return True if the kubectl verb in ``args`` modifies resources."""
    return bool(args) and args[0] in WRITE_VERBS


def matches_grep_pattern(line: str, pattern: str) -> bool:
    """Return True if ``line`` matches a grep pattern.

    ``/regex/`` is a regular expression, ``a|b`` matches either substring,
    anything else is a plain substring.
    """
    if len(pattern) > 2 and pattern.startswith("/") and pattern.endswith("/"):
        return match_pattern(line, pattern)
    if "|" in pattern:
        return any(part in line for part in pattern.split("|"))
    return pattern in line


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def _format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    text = f"{round(secs, 9):g}s"
    if hours:
        return f"{int(hours)}h{int(minutes)}m{text}"
    if minutes:
        return f"{int(minutes)}m{text}"
    return text


@dataclass
class Client:
    """A set of kubectl contexts to run commands against."""

    contexts: list[str] = field(default_factory=list)

    def execute_command(
        self,
        kubectl_args: Sequence[str],
        contexts: Sequence[str],
        force: bool = False,
        timeout: float = 0,
        grep_pattern: str = "",
    ) -> None:
        """Run kubectl with ``kubectl_args`` in each context concurrently.

        Each context's output is printed as one block. Write operations are
        refused unless ``force`` is set. A positive ``timeout`` (seconds)
        limits each run; a non-empty ``grep_pattern`` filters output lines.
        """
        kubectl_args = list(kubectl_args)
        if is_write_operation(kubectl_args) and not force:
            raise KxctlError(
                f"write operation detected: '{' '.join(kubectl_args)}'. "
                "Use --force flag to confirm"
            )
        contexts = list(contexts)
        if not contexts:
            return

        lock = threading.Lock()

        def worker(context_name: str) -> None:
            output, error = self._run_in_context(context_name, kubectl_args, timeout)
            with lock:
                print(f"Context: {context_name}")
                for line in output.split("\n"):
                    if line and (not grep_pattern or matches_grep_pattern(line, grep_pattern)):
                        print(f"  {line}")
                sys.stdout.flush()
                if error is not None:
                    print(f"  {error}", file=sys.stderr, flush=True)
                print(flush=True)

        with ThreadPoolExecutor(max_workers=len(contexts)) as pool:
            list(pool.map(worker, contexts))

    @staticmethod
    def _run_in_context(
        context_name: str, kubectl_args: list[str], timeout: float
    ) -> tuple[str, str | None]:
        command = [KUBECTL, "--context", context_name, *kubectl_args]
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=timeout if timeout and timeout > 0 else None,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            return _decode(exc.output), f"Timeout after {_format_duration(timeout)}"
        except OSError as exc:
            return "", f"Error: {exc}"
        output = _decode(completed.stdout)
        if completed.returncode > 0:
            return output, f"Error: exit status {completed.returncode}"
        if completed.returncode < 0:
            return output, f"Error: terminated by signal {-completed.returncode}"
        return output, None