import subprocess

import pytest

from kxctl.cli import (
    STATUS_FIELD_SELECTOR,
    CommandFlags,
    main,
    parse_duration,
    parse_flags,
    print_help,
    run,
    run_exec,
    run_list,
    run_status,
    run_version,
    split_exec_args,
)
from kxctl.client import KxctlError

CONTEXTS = ["dev", "staging", "prod-eu", "prod-us"]


@pytest.fixture
def kubectl(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(list(cmd))
        if cmd[1:3] == ["config", "get-contexts"]:
            out = ("\n".join(CONTEXTS) + "\n").encode()
        else:
            out = b"pod-a Running\npod-b Pending\n"
        return subprocess.CompletedProcess(cmd, 0, stdout=out)

    monkeypatch.setattr("kxctl.client.subprocess.run", fake_run)
    return calls


def _context_calls(calls):
    return [c for c in calls if len(c) > 1 and c[1] == "--context"]


def _printed_contexts(out):
    return [
        line[len("Context: "):]
        for line in out.splitlines()
        if line.startswith("Context: ")
    ]


def test_parse_duration_simple():
    assert parse_duration("30s") == 30
    assert parse_duration("0") == 0


def test_parse_duration_components_add_up():
    assert parse_duration("2m30s") == parse_duration("2m") + parse_duration("30s")
    assert parse_duration("1h") == 60 * parse_duration("1m")
    assert parse_duration("1.5s") == pytest.approx(parse_duration("1500ms"))
    assert parse_duration("-5s") == -parse_duration("5s")


@pytest.mark.parametrize("text", ["", "abc", "10", "5x", ".s", "1s2", "-"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_parse_flags_collects_values():
    flags = parse_flags(
        ["-i", "prod", "--include", "dev", "-e", "us", "-g", "Running", "-f", "-A", "-t", "30s"]
    )
    assert flags == CommandFlags(
        include=["prod", "dev"],
        exclude=["us"],
        force=True,
        all_namespaces=True,
        timeout=30,
        grep="Running",
    )


def test_parse_flags_ignores_plain_arguments():
    assert parse_flags(["get", "pods"]) == CommandFlags()


@pytest.mark.parametrize(
    "args, message",
    [
        (["-i"], "include flag requires a value"),
        (["-e", "-f"], "exclude flag requires a value"),
        (["--grep"], "grep flag requires a value"),
        (["-t"], "timeout flag requires a value"),
        (["-t", "soon"], "invalid timeout value: soon"),
        (["--bogus"], "unknown flag: --bogus"),
    ],
)
def test_parse_flags_errors(args, message):
    with pytest.raises(KxctlError) as info:
        parse_flags(args)
    assert str(info.value) == message


def test_split_exec_args_with_separator():
    assert split_exec_args(["-i", "prod", "--", "get", "pods"]) == (
        ["-i", "prod"],
        ["get", "pods"],
    )


def test_split_exec_args_without_separator():
    assert split_exec_args(["-i", "prod", "get", "pods"]) == (["-i", "prod"], ["get", "pods"])
    assert split_exec_args(["--force", "get"]) == (["--force"], ["get"])
    assert split_exec_args(["-f", "get"]) == (["-f", "get"], [])


def test_print_help_and_version(capsys):
    print_help()
    assert capsys.readouterr().out.startswith("kxctl - Kubernetes Context Control")
    run_version()
    assert capsys.readouterr().out == "kxctl version dev\n"


def test_run_without_arguments_prints_help(capsys):
    run([])
    assert "Usage:" in capsys.readouterr().out


def test_run_unknown_command():
    with pytest.raises(KxctlError, match="unknown command: bogus"):
        run(["bogus"])


def test_main_reports_errors(capsys):
    assert main(["bogus"]) == 1
    err = capsys.readouterr().err
    assert "Error: unknown command: bogus" in err
    assert main(["version"]) == 0


def test_run_list_filters(kubectl, capsys):
    run_list(["-i", "prod", "-e", "us"])
    assert capsys.readouterr().out.split() == ["prod-eu"]


def test_run_list_no_match(kubectl):
    with pytest.raises(KxctlError, match="no contexts match the provided filters"):
        run_list(["-i", "nothing-here"])


def test_run_exec_without_command_lists(kubectl, capsys):
    run_exec(["-e", "prod"])
    assert capsys.readouterr().out.split() == ["dev", "staging"]
    assert _context_calls(kubectl) == []


def test_run_exec_runs_kubectl(kubectl, capsys):
    run_exec(["-i", "dev", "-g", "Pending", "--", "get", "pods"])
    assert _context_calls(kubectl) == [["kubectl", "--context", "dev", "get", "pods"]]
    out = capsys.readouterr().out
    assert "Context: dev" in out
    assert "pod-b Pending" in out
    assert "pod-a Running" not in out


def test_run_exec_refuses_write_without_force(kubectl):
    with pytest.raises(KxctlError, match="write operation detected"):
        run_exec(["-i", "dev", "--", "delete", "pod", "x"])
    assert _context_calls(kubectl) == []


def test_leading_flag_means_exec(kubectl, capsys):
    run(["-i", "staging", "--", "get", "nodes"])
    out = capsys.readouterr().out
    assert _printed_contexts(out) == ["staging"]
    assert "  pod-a Running" in out
    assert "  pod-b Pending" in out
    assert _context_calls(kubectl) == [["kubectl", "--context", "staging", "get", "nodes"]]


def test_run_status_builds_command(kubectl, capsys):
    run_status(["-A", "-i", "dev", "--", "-o", "json"])
    out = capsys.readouterr().out
    assert _printed_contexts(out) == ["dev"]
    assert "  pod-b Pending" in out
    assert _context_calls(kubectl) == [
        [
            "kubectl",
            "--context",
            "dev",
            "get",
            "pods",
            "--field-selector",
            STATUS_FIELD_SELECTOR,
            "--all-namespaces",
            "-o",
            "json",
        ]
    ]


def test_run_status_all_contexts(kubectl, capsys):
    run(["status"])
    out = capsys.readouterr().out
    assert sorted(_printed_contexts(out)) == sorted(CONTEXTS)
    assert out.count("  pod-b Pending") == len(CONTEXTS)
    calls = _context_calls(kubectl)
    assert sorted(c[2] for c in calls) == sorted(CONTEXTS)
    assert all("--all-namespaces" not in c for c in calls)