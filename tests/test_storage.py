from __future__ import annotations

import logging
import socket

import pytest

from upcheck import resolver
from upcheck.storage import default_targets, load_targets, parse_targets


@pytest.fixture(autouse=True)
def no_dns(monkeypatch):
    def _fail(host, *args, **kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(resolver.socket, "getaddrinfo", _fail)


def test_load_skips_comments_and_bad_lines(tmp_path, caplog) -> None:
    hosts = tmp_path / "hosts.txt"
    hosts.write_text("# lab gear\n203.0.113.5:9999,internal\n203.0.113.6:99999\n", encoding="utf-8")

    with caplog.at_level(logging.INFO):
        targets = load_targets(hosts)

    assert len(targets) == 1
    target = targets[0]
    assert (target.name, target.host, target.port) == ("203.0.113.5:9999,internal", "203.0.113.5", 9999)
    assert target.attempts == 0
    assert target.failures == 0
    assert target.is_alive
    assert "invalid line: 203.0.113.6:99999 - skipping" in caplog.text


def test_unresolvable_host_is_excluded() -> None:
    targets = parse_targets(["badhost.invalid", "198.51.100.7"])

    assert [t.host for t in targets] == ["198.51.100.7"]
    assert targets[0].port == 80


def test_blank_lines_are_ignored() -> None:
    assert parse_targets(["", "   ", "\n"]) == []


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_targets(tmp_path / "nope.txt")


def test_default_targets_start_dead() -> None:
    targets = default_targets()

    assert [(t.host, t.port) for t in targets] == [("8.8.8.8", 53), ("1.1.1.1", 53)]
    assert not any(t.is_alive for t in targets)
    assert all(t.attempts == 0 and t.errors == {} for t in targets)


def test_undecodable_bytes_only_drop_their_line(tmp_path) -> None:
    hosts = tmp_path / "hosts.txt"
    hosts.write_bytes(b"# B\xfcro rack\n203.0.113.5:9999\n\xff\xfe-bad\n198.51.100.7\n")

    targets = load_targets(hosts)

    assert [(t.host, t.port) for t in targets] == [("203.0.113.5", 9999), ("198.51.100.7", 80)]


def test_leading_bom_is_ignored(tmp_path) -> None:
    hosts = tmp_path / "hosts.txt"
    hosts.write_bytes(b"\xef\xbb\xbf203.0.113.5:22\n")

    assert [(t.host, t.port) for t in load_targets(hosts)] == [("203.0.113.5", 22)]
