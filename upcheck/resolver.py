"""
Design (resolver.py)
- Purpose: Turn one target descriptor line ("host[:port][,type]") into a validated (host, port).
- Inputs: Descriptor text; default port.
- Outputs: (host, port) tuple, or DescriptorError describing why the line is unusable.
- Side effects: Blocking DNS lookup (socket.getaddrinfo) for non-literal hosts.
- Thread-safety: Stateless; safe to call from any thread.
"""

import socket
from typing import Tuple

from .config import DEFAULT_PORT
from .utils import is_ip_literal


class DescriptorError(ValueError):
    """A target descriptor could not be turned into a usable host/port."""


def split_host_port(text: str) -> Tuple[str, str | None]:
    """
    Purpose: Separate host and optional port text on the last colon.
    Outputs: (host, port_text or None)
    Notes: "[v6]:port" and a bare IPv6 literal are understood.
    """
    if text.startswith("["):
        end = text.find("]")
        if end == -1:
            raise DescriptorError(f"unterminated '[' in {text!r}")
        host, rest = text[1:end], text[end + 1:]
        if not rest:
            return host, None
        if not rest.startswith(":"):
            raise DescriptorError(f"unexpected text after ']' in {text!r}")
        return host, rest[1:]
    if text.count(":") > 1 and is_ip_literal(text):
        return text, None
    host, sep, port_text = text.rpartition(":")
    if not sep:
        return text, None
    return host, port_text


def parse_port(port_text: str | None, default_port: int = DEFAULT_PORT) -> int:
    if port_text is None:
        return default_port
    text = port_text.strip()
    # plain ASCII digits with an optional sign; int() alone would also take "8_0" or "٨٠"
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not (digits.isascii() and digits.isdigit()):
        raise DescriptorError(f"invalid port {port_text!r}")
    port = int(text)
    if not 1 <= port <= 65535:
        raise DescriptorError(f"port {port} out of range 1-65535")
    return port


def resolve_host(host: str) -> None:
    """Raise DescriptorError unless host is an IP literal or resolves to at least one address."""
    if is_ip_literal(host):
        return
    try:
        socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as e:
        raise DescriptorError(f"cannot resolve {host!r}: {e}") from e


def parse_descriptor(line: str, default_port: int = DEFAULT_PORT) -> Tuple[str, int]:
    """
    Purpose: Validate one descriptor line.
    Inputs: line (e.g. "example.com:443,external"), default_port used when none is given.
    Outputs: (host, port)
    Raises: DescriptorError for empty host, bad/out-of-range port, or unresolvable hostname.
    """
    # TODO: parse the ",type" suffix into Target.type once internal/external targets are reported apart
    text = line.split(",", 1)[0].strip()
    host, port_text = split_host_port(text)
    host = host.strip()
    if not host:
        raise DescriptorError(f"missing host in {line!r}")
    port = parse_port(port_text, default_port)
    resolve_host(host)
    return host, port
