"""Typed exceptions for openwrt-connect."""

from __future__ import annotations


class OpenwrtConnectError(Exception):
    """Base exception for openwrt-connect failures."""


class PathMappingError(OpenwrtConnectError):
    """Raised when a path setting cannot be safely mapped."""


class UnknownCommandError(OpenwrtConnectError):
    """Raised when a command name is not defined in the loaded config."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Unknown command: {name}")


class TransportError(OpenwrtConnectError):
    """Raised for ssh invocation failures."""


class SshNotFoundError(TransportError):
    """Raised when the ssh or ssh-keygen executable cannot be started."""


class KeySetupError(TransportError):
    """Raised when key authentication cannot be established."""
