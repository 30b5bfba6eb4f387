from __future__ import annotations

from pathlib import Path

import pytest

import main


def test_parser_defaults() -> None:
    args = main.build_parser().parse_args([])

    assert args.hosts == Path("hosts.txt")
    assert args.interval == 1.0
    assert args.report_interval == 10.0
    assert args.timeout == 5.0
    assert args.confirm == 1
    assert not args.defaults


def test_missing_hosts_file_is_fatal(tmp_path, capsys) -> None:
    code = main.main(["--hosts", str(tmp_path / "hosts.txt"), "--skip-network-info"])

    assert code == 1
    assert "error opening" in capsys.readouterr().err


def test_confirm_must_be_positive(capsys) -> None:
    assert main.main(["--confirm", "0", "--skip-network-info"]) == 2


@pytest.mark.parametrize("flags", [
    ["--timeout", "0"],
    ["--timeout", "-1"],
    ["--interval", "-1"],
    ["--report-interval", "-0.5"],
    ["--timeout", "nan"],
])
def test_out_of_range_timings_are_rejected(flags, capsys) -> None:
    assert main.main(flags + ["--defaults", "--skip-network-info"]) == 2
    assert "must" in capsys.readouterr().err
