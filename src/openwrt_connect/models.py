"""Domain models for openwrt-connect."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_IP,
    DEFAULT_PRODUCT_NAME,
    DEFAULT_SSH_KEY_PREFIX,
    DEFAULT_SSH_USER,
)


class InteractiveSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["interactive"] = "interactive"


class Script(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["script"] = "script"
    body: str = ""
    # Relative path as written in the config, e.g. "./scripts/setup.sh".
    file_ref: str | None = None

    @property
    def is_file_ref(self) -> bool:
        return self.file_ref is not None


class RemoteFetch(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["remote_fetch"] = "remote_fetch"
    url: str
    # Router-side install directory and persistent wrapper path (dir, bin keys).
    install_dir: str | None = None
    bin_path: str | None = None


class DirectCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["direct"] = "direct"
    command_line: str


CommandKind = Annotated[
    InteractiveSession | Script | RemoteFetch | DirectCommand,
    Field(discriminator="type"),
]


class CommandDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    label: str = ""
    kind: CommandKind = Field(default_factory=InteractiveSession)


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_name: str = DEFAULT_PRODUCT_NAME
    default_ip: str = DEFAULT_IP
    ssh_user: str = DEFAULT_SSH_USER
    ssh_key_prefix: str = DEFAULT_SSH_KEY_PREFIX
    commands: tuple[CommandDef, ...] = ()


class WarningKind(StrEnum):
    CONFIG_NOT_FOUND = "config_not_found"
    CONFIG_UNREADABLE = "config_unreadable"
    SCRIPT_FILE_MISSING = "script_file_missing"
    MULTIPLE_CONTENT_KEYS = "multiple_content_keys"


@dataclass(frozen=True)
class ConfigWarning:
    kind: WarningKind
    message: str
    command: str | None = None
    path: Path | None = None


@dataclass(frozen=True)
class ParseResult:
    config: Config
    warnings: tuple[ConfigWarning, ...] = ()


@dataclass(frozen=True)
class LoadedConfig:
    config: Config
    config_path: Path | None
    warnings: tuple[ConfigWarning, ...] = ()
