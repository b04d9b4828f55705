"""Section state machine that turns .conf text into a Config.

The parser never fails on malformed input. Lines without a separator,
unterminated section headers and empty command names are skipped so that
hand-edited files still load.

A blank ``script =`` switches the parser into multiline-script mode. In that
mode every line is first checked by ``_ends_multiline``; a section header or an
un-indented ``key = value`` line ends the block and is then handled again on
the normal path, so no line is lost.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .constants import COMMAND_SECTION_PREFIX, GENERAL_SECTION, SCRIPT_FILE_MARKER
from .line_scanner import (
    is_indented,
    is_skippable,
    parse_section_header,
    split_key_value,
    strip_content_indent,
    trim,
)
from .logging_utils import log_event
from .models import (
    CommandDef,
    Config,
    ConfigWarning,
    DirectCommand,
    InteractiveSession,
    ParseResult,
    RemoteFetch,
    Script,
    WarningKind,
)
from .script_resolver import resolve_script_files

_GENERAL_KEYS = {
    "product_name": "product_name",
    "default_ip": "default_ip",
    "ssh_user": "ssh_user",
    "ssh_key_prefix": "ssh_key_prefix",
}

_INTERACTIVE = "interactive"
_SCRIPT = "script"
_URL = "url"
_CMD = "cmd"
_DIR = "dir"
_BIN = "bin"


@dataclass
class _CommandDraft:
    """Mutable per-section record; frozen into a CommandDef after the pass."""

    name: str
    label: str = ""
    kind: str = _INTERACTIVE
    script_body: str = ""
    script_file_ref: str | None = None
    url: str = ""
    install_dir: str | None = None
    bin_path: str | None = None
    command_line: str = ""
    content_keys: list[str] = field(default_factory=list)

    def set_kind_once(self, kind: str) -> None:
        if self.kind == _INTERACTIVE:
            self.kind = kind

    def note_content_key(self, key: str) -> None:
        if key not in self.content_keys:
            self.content_keys.append(key)

    def to_command(self) -> CommandDef:
        if self.kind == _SCRIPT:
            kind = Script(body=self.script_body, file_ref=self.script_file_ref)
        elif self.kind == _URL:
            kind = RemoteFetch(
                url=self.url, install_dir=self.install_dir, bin_path=self.bin_path
            )
        elif self.kind == _CMD:
            kind = DirectCommand(command_line=self.command_line)
        else:
            kind = InteractiveSession()
        return CommandDef(name=self.name, label=self.label, kind=kind)


@dataclass
class _ParserState:
    current_section: str = ""
    current_command: _CommandDraft | None = None
    reading_multiline_script: bool = False
    settings: dict[str, str] = field(default_factory=dict)
    drafts: list[_CommandDraft] = field(default_factory=list)


def parse_config(text: str | bytes, *, base_dir: Path | None) -> ParseResult:
    """Parse config text and resolve ``./`` script references against base_dir.

    With ``base_dir=None`` file references are left unresolved (empty body).
    """
    state = _ParserState()

    for raw_line in _iter_lines(_decode(text)):
        if state.reading_multiline_script:
            if not _ends_multiline(raw_line):
                _append_script_line(state, raw_line)
                continue
            state.reading_multiline_script = False
        _dispatch_line(state, raw_line)

    commands = tuple(draft.to_command() for draft in state.drafts)
    config = Config(**state.settings, commands=commands)
    warnings = _multiple_content_key_warnings(state.drafts)

    if base_dir is None:
        return ParseResult(config=config, warnings=warnings)

    resolved = resolve_script_files(config, base_dir=base_dir)
    return ParseResult(config=resolved.config, warnings=warnings + resolved.warnings)


def _decode(text: str | bytes) -> str:
    if isinstance(text, bytes):
        decoded = text.decode("utf-8-sig", errors="replace")
    else:
        decoded = text.removeprefix("\ufeff")
    # Script bodies go to a POSIX shell; CRLF and bare CR become LF.
    return decoded.replace("\r\n", "\n").replace("\r", "\n")


def _iter_lines(text: str) -> io.StringIO:
    # Each line keeps its trailing "\n" so multiline bodies stay intact.
    return io.StringIO(text, newline="")


def _ends_multiline(raw_line: str) -> bool:
    trimmed = trim(raw_line)
    if trimmed.startswith("["):
        return True
    if is_indented(raw_line) or trimmed.startswith("#"):
        return False
    return "=" in trimmed


def _append_script_line(state: _ParserState, raw_line: str) -> None:
    if is_skippable(trim(raw_line)):
        return
    draft = state.current_command
    if draft is None:
        return
    draft.script_body += strip_content_indent(raw_line)


def _dispatch_line(state: _ParserState, raw_line: str) -> None:
    line = trim(raw_line)
    if is_skippable(line):
        return

    if line.startswith("["):
        section = parse_section_header(line)
        if section is not None:
            _enter_section(state, section)
        return

    pair = split_key_value(line)
    if pair is None:
        return
    key, value = pair

    if state.current_section == GENERAL_SECTION:
        field_name = _GENERAL_KEYS.get(key)
        if field_name is not None:
            state.settings[field_name] = value

    if state.current_command is not None:
        _apply_command_key(state, state.current_command, key, value)


def _enter_section(state: _ParserState, section: str) -> None:
    state.current_section = section
    state.current_command = None

    if not section.startswith(COMMAND_SECTION_PREFIX):
        return
    name = section[len(COMMAND_SECTION_PREFIX):]
    if not name:
        return

    draft = _CommandDraft(name=name)
    state.drafts.append(draft)
    state.current_command = draft


def _apply_command_key(
    state: _ParserState, draft: _CommandDraft, key: str, value: str
) -> None:
    if key == "label":
        draft.label = value
        return

    if key == _SCRIPT:
        draft.note_content_key(key)
        if value == "":
            draft.script_body = ""
            draft.script_file_ref = None
            state.reading_multiline_script = True
        elif value.startswith(SCRIPT_FILE_MARKER):
            draft.script_body = ""
            draft.script_file_ref = value
        else:
            draft.script_body = value
            draft.script_file_ref = None
        draft.set_kind_once(_SCRIPT)
        return

    if key == _URL:
        draft.note_content_key(key)
        draft.url = value
        draft.set_kind_once(_URL)
        return

    if key == _CMD:
        draft.note_content_key(key)
        draft.command_line = value
        draft.set_kind_once(_CMD)
        return

    # dir and bin only reach RemoteFetch commands.
    # 'icon' and unknown keys are ignored.
    if key == _DIR:
        draft.install_dir = value or None
    elif key == _BIN:
        draft.bin_path = value or None


def _multiple_content_key_warnings(
    drafts: list[_CommandDraft],
) -> tuple[ConfigWarning, ...]:
    warnings: list[ConfigWarning] = []
    for draft in drafts:
        if len(draft.content_keys) < 2:
            continue
        ignored = [key for key in draft.content_keys if key != draft.kind]
        message = (
            f"Command '{draft.name}' defines {', '.join(draft.content_keys)}; "
            f"using '{draft.kind}', ignoring {', '.join(ignored)}."
        )
        log_event(
            "multiple_content_keys",
            level=logging.WARNING,
            command=draft.name,
            keys=draft.content_keys,
            used=draft.kind,
        )
        warnings.append(
            ConfigWarning(
                kind=WarningKind.MULTIPLE_CONTENT_KEYS,
                message=message,
                command=draft.name,
            )
        )
    return tuple(warnings)
