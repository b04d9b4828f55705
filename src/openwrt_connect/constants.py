"""Literal constants used by openwrt-connect."""

import os

APP_NAME = "openwrt-connect"

# ============================================================================
# Configuration file
# ============================================================================

CONFIG_FILE_GLOB = "*.conf"
CONFIG_HOME_ENV = "OPENWRT_CONNECT_HOME"
LOG_FILE_ENV = "OPENWRT_CONNECT_LOG"

GENERAL_SECTION = "general"
COMMAND_SECTION_PREFIX = "command."

# Script values starting with this marker are read from a file next to the config.
SCRIPT_FILE_MARKER = "./"
SCRIPT_CONTENT_INDENT = "  "

DEFAULT_PRODUCT_NAME = "OpenWrt Connect"
DEFAULT_IP = "192.168.1.1"
DEFAULT_SSH_USER = "root"
DEFAULT_SSH_KEY_PREFIX = "owrt-connect"

# ============================================================================
# SSH
# ============================================================================

SSH_BINARY = "ssh"
SSH_KEYGEN_BINARY = "ssh-keygen"
SSH_DIR = "~/.ssh"
KEY_PROBE_TIMEOUT_SEC = 5

# Routers are reflashed often, so host keys are never pinned.
SSH_OPTIONS = (
    "-o", "StrictHostKeyChecking=no",
    "-o", f"UserKnownHostsFile={os.devnull}",
    "-o", f"GlobalKnownHostsFile={os.devnull}",
    "-o", "HostKeyAlgorithms=+ssh-rsa",
    "-o", "PubkeyAcceptedKeyTypes=+ssh-rsa",
    "-o", "LogLevel=ERROR",
)

REMOTE_FETCH_DIR = "/tmp"

# ============================================================================
# Console output
# ============================================================================

BANNER_RULE = "=" * 40
LIST_PREVIEW_WIDTH = 60
WARNING_PREFIX = "WARNING:"
ERROR_PREFIX = "ERROR:"

USAGE = """\
Usage: openwrt-connect [command|--list|--help]

  (no args)    Interactive SSH connection
  <command>    Execute command defined in .conf
  --list       List available commands
  --help, -h   Show this help

Environment:
  OPENWRT_CONNECT_HOME   Directory searched for the .conf file
                         (default: current directory; accepts ~ and @).
  OPENWRT_CONNECT_LOG    Optional log file path.
"""
