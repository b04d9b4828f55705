"""Default gateway discovery through the platform routing tools."""

from __future__ import annotations

import ipaddress
import re
import subprocess
import sys
from collections.abc import Callable

CaptureRunner = Callable[[list[str]], str | None]

_GATEWAY_PATTERNS = (
    # ip route show default
    re.compile(r"^default\s+via\s+(\S+)"),
    # route print -4 (Windows): destination, netmask, gateway, ...
    re.compile(r"^0\.0\.0\.0\s+0\.0\.0\.0\s+(\S+)"),
    # route -n get default (macOS)
    re.compile(r"^gateway:\s*(\S+)"),
)

_PRIVATE_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)


def is_private_ip(text: str) -> bool:
    try:
        address = ipaddress.IPv4Address(text.strip())
    except ValueError:
        return False
    return any(address in network for network in _PRIVATE_NETWORKS)


def route_command(platform: str = sys.platform) -> list[str]:
    if platform == "win32":
        return ["route", "print", "-4"]
    if platform == "darwin":
        return ["route", "-n", "get", "default"]
    return ["ip", "route", "show", "default"]


def parse_gateways(route_output: str) -> list[str]:
    gateways: list[str] = []
    for raw_line in route_output.splitlines():
        line = raw_line.strip()
        for pattern in _GATEWAY_PATTERNS:
            match = pattern.match(line)
            if match:
                gateways.append(match.group(1))
                break
    return gateways


def run_capture(argv: list[str]) -> str | None:
    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout


def detect_router_ip(
    *,
    run: CaptureRunner = run_capture,
    platform: str = sys.platform,
) -> str | None:
    """Return the first private IPv4 default gateway, or None."""
    output = run(route_command(platform))
    if not output:
        return None
    for gateway in parse_gateways(output):
        if is_private_ip(gateway):
            return gateway
    return None
