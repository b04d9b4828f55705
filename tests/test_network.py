import pytest

from openwrt_connect.network import (
    detect_router_ip,
    is_private_ip,
    parse_gateways,
    route_command,
)

LINUX_ROUTES = """\
default via 203.0.113.1 dev wan0 proto static metric 50
default via 192.168.8.1 dev wlan0 proto dhcp metric 600
"""

WINDOWS_ROUTES = """\
IPv4 Route Table
===========================================================================
Active Routes:
Network Destination        Netmask          Gateway       Interface  Metric
          0.0.0.0          0.0.0.0      192.168.1.1    192.168.1.20     25
        127.0.0.0        255.0.0.0         On-link         127.0.0.1    331
"""

MACOS_ROUTES = """\
   route to: default
destination: default
       mask: default
    gateway: 10.1.2.3
  interface: en0
"""


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("10.0.0.1", True),
        ("172.16.5.4", True),
        ("172.31.255.255", True),
        ("172.32.0.1", False),
        ("192.168.1.1", True),
        ("8.8.8.8", False),
        ("not-an-ip", False),
        ("fe80::1", False),
    ],
)
def test_is_private_ip(text: str, expected: bool) -> None:
    assert is_private_ip(text) is expected


def test_route_command_per_platform() -> None:
    assert route_command("win32") == ["route", "print", "-4"]
    assert route_command("darwin") == ["route", "-n", "get", "default"]
    assert route_command("linux") == ["ip", "route", "show", "default"]


def test_parse_gateways_handles_each_format() -> None:
    assert parse_gateways(LINUX_ROUTES) == ["203.0.113.1", "192.168.8.1"]
    assert parse_gateways(WINDOWS_ROUTES) == ["192.168.1.1"]
    assert parse_gateways(MACOS_ROUTES) == ["10.1.2.3"]


def test_detect_router_ip_returns_first_private_gateway() -> None:
    calls: list[list[str]] = []

    def fake_run(argv: list[str]) -> str:
        calls.append(argv)
        return LINUX_ROUTES

    assert detect_router_ip(run=fake_run, platform="linux") == "192.168.8.1"
    assert calls == [["ip", "route", "show", "default"]]


def test_detect_router_ip_without_output_returns_none() -> None:
    assert detect_router_ip(run=lambda _argv: None, platform="linux") is None
    assert detect_router_ip(run=lambda _argv: "default via 8.8.8.8 dev x\n") is None
