"""
Design (network.py)
- Purpose: One-shot local network context at startup: local IPv4 address, its netmask, the
           default gateway, plus a pure same-subnet test. Informational only.
- Inputs: Interface table (psutil), `route` command output (per OS family).
- Outputs: IPv4Address values, NetworkContext triple, bools.
- Side effects: get_default_gateway() spawns `route`.
- Errors: Discovery failures raise NetworkInfoError; get_network_info() logs them as warnings
          and returns what it could find.
- Thread-safety: Stateless; safe to call from any thread.
"""

import ipaddress
import platform
import socket
import subprocess
from typing import Callable, Dict, List, NamedTuple, Optional, Union

import psutil

from .logger_config import get_logger, kv

logger = get_logger("network")

IPLike = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]
MaskLike = Union[str, int, ipaddress.IPv4Address]


class NetworkInfoError(RuntimeError):
    """Local network context could not be determined."""


class NetworkContext(NamedTuple):
    local_ip: Optional[ipaddress.IPv4Address]
    netmask: Optional[ipaddress.IPv4Address]
    gateway: Optional[ipaddress.IPv4Address]


# -------- Interfaces --------

def _ipv4_assignments():
    try:
        table = psutil.net_if_addrs()
    except OSError as e:
        raise NetworkInfoError(f"error getting network interfaces: {e}") from e
    for name, addrs in table.items():
        for addr in addrs:
            if addr.family == socket.AF_INET:
                yield name, addr


def get_local_ip() -> ipaddress.IPv4Address:
    """First non-loopback IPv4 address assigned to any interface."""
    for _, addr in _ipv4_assignments():
        ip = ipaddress.IPv4Address(addr.address)
        if not ip.is_loopback:
            return ip
    raise NetworkInfoError("no IP found")


def get_netmask(ip: IPLike) -> ipaddress.IPv4Address:
    """Netmask assigned together with `ip`."""
    wanted = ipaddress.ip_address(ip)
    for _, addr in _ipv4_assignments():
        if ipaddress.ip_address(addr.address) == wanted and addr.netmask:
            return ipaddress.IPv4Address(addr.netmask)
    raise NetworkInfoError(f"no netmask found for {wanted}")


# -------- Masks and subnets --------

def to_netmask(mask: MaskLike) -> ipaddress.IPv4Address:
    """
    Accepts 24, "24", "/24", "255.255.255.0" or an IPv4Address and returns the dotted mask.
    Raises ValueError for anything that isn't a valid IPv4 netmask.
    """
    if isinstance(mask, ipaddress.IPv4Address):
        mask = str(mask)
    text = str(mask).strip().lstrip("/")
    return ipaddress.IPv4Network(f"0.0.0.0/{text}").netmask


def netmask_to_string(mask: MaskLike) -> str:
    """e.g. netmask_to_string("/24") -> "255.255.255.0"."""
    return str(to_netmask(mask))


def is_in_same_subnet(base_ip: IPLike, mask: MaskLike, check_ip: IPLike) -> bool:
    """True when base_ip AND mask equals check_ip AND mask."""
    base = ipaddress.ip_address(base_ip)
    check = ipaddress.ip_address(check_ip)
    if base.version != 4 or check.version != 4:
        return False
    bits = int(to_netmask(mask))
    return int(base) & bits == int(check) & bits


# -------- Default gateway --------

Runner = Callable[[List[str]], str]


def run_command(cmd: List[str]) -> str:
    try:
        result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                text=True, check=True, timeout=10)
    except (OSError, subprocess.SubprocessError) as e:
        raise NetworkInfoError(f"{' '.join(cmd)} failed: {e}") from e
    return result.stdout


def parse_linux_routes(output: str) -> ipaddress.IPv4Address:
    """
    Gateway column of the 0.0.0.0 destination in `route -n` output:

        Destination     Gateway         Genmask         Flags Metric Ref    Use Iface
        0.0.0.0         192.168.0.254   0.0.0.0         UG    0      0        0 enp6s0
    """
    for line in output.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "0.0.0.0":
            try:
                return ipaddress.IPv4Address(parts[1])
            except ValueError:
                raise NetworkInfoError(f"invalid gateway IP address {parts[1]!r}") from None
    raise NetworkInfoError("no default route found")


def parse_darwin_route(output: str) -> ipaddress.IPv4Address:
    """The "gateway: a.b.c.d" line of `route -n get default` output."""
    for line in output.splitlines():
        line = line.strip()
        if line.startswith("gateway:"):
            parts = line.split()
            if len(parts) < 2:
                break
            try:
                return ipaddress.IPv4Address(parts[1])
            except ValueError:
                raise NetworkInfoError(f"invalid gateway IP address {parts[1]!r}") from None
    raise NetworkInfoError("no default gateway found")


class GatewayProvider:
    """A `route` invocation plus the parser that understands its output."""

    def __init__(self, command: List[str], parse: Callable[[str], ipaddress.IPv4Address]):
        self.command = command
        self.parse = parse

    def default_gateway(self, runner: Runner = run_command) -> ipaddress.IPv4Address:
        return self.parse(runner(self.command))


GATEWAY_PROVIDERS: Dict[str, GatewayProvider] = {
    "linux": GatewayProvider(["route", "-n"], parse_linux_routes),
    "darwin": GatewayProvider(["route", "-n", "get", "default"], parse_darwin_route),
}


def get_default_gateway(system: Optional[str] = None, runner: Runner = run_command) -> ipaddress.IPv4Address:
    system = (system or platform.system()).lower()
    logger.info("detecting default gateway" + kv(os=system))
    provider = GATEWAY_PROVIDERS.get(system)
    if provider is None:
        raise NetworkInfoError(f"unsupported OS: {system}")
    return provider.default_gateway(runner)


def get_network_info(system: Optional[str] = None, runner: Runner = run_command) -> NetworkContext:
    """
    Purpose: Gather (local IP, netmask, gateway); stop at the first failure.
    Outputs: NetworkContext with None for whatever couldn't be determined.
    Side effects: Logs a warning per failure. Never raises NetworkInfoError.
    """
    try:
        local_ip = get_local_ip()
    except NetworkInfoError as e:
        logger.warning("error getting local IP" + kv(error=e))
        return NetworkContext(None, None, None)
    try:
        netmask = get_netmask(local_ip)
    except NetworkInfoError as e:
        logger.warning("error getting netmask" + kv(error=e))
        return NetworkContext(local_ip, None, None)
    try:
        gateway = get_default_gateway(system, runner)
    except NetworkInfoError as e:
        logger.warning("error getting default gateway" + kv(error=e))
        return NetworkContext(local_ip, netmask, None)
    return NetworkContext(local_ip, netmask, gateway)


def log_network_info(context: NetworkContext) -> None:
    if context.local_ip is not None:
        logger.info(f"Local IP: {context.local_ip}")
    if context.netmask is not None:
        logger.info(f"Netmask: {context.netmask}")
    if context.gateway is not None:
        logger.info(f"Default Gateway: {context.gateway}")
