"""Settings model and the ``.mconf`` file formats it is stored in."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

MAX_COLOR_LEN = 16
MAX_CMD_LEN = 256
MAX_KEY_LEN = 32
MAX_BINDS = 32
MAX_EXEC_ONCE = 32

PathLike = Union[str, "os.PathLike[str]"]

_WS = r"[ \t\n\v\f\r]"
_NON_WS = r"[^ \t\n\v\f\r]"

_LAUNCHER_RE = re.compile(rf'launcher-command{_WS}*={_WS}*"([^"]{{1,255}})')
_EXEC_ONCE_RE = re.compile(rf'exec-once{_WS}*={_WS}*"([^"]{{1,255}})')
_ASSIGN_RE = re.compile(rf"([^=]{{1,63}})={_WS}*({_NON_WS}{{1,63}})")
_KEYBIND_RE = re.compile(rf'{_WS}*([^=]{{1,31}})={_WS}*"([^"]{{1,255}})')

# Line buffer sizes used when reading each kind of file; longer lines are
# consumed in pieces of one character less than the buffer.
_CONFIG_LINE_BUFFER = 64
_BLOCK_LINE_BUFFER = 256


def _read_chunks(path: PathLike, buffer_size: int) -> Iterator[str]:
    """Yield the file's lines, splitting any longer than the buffer allows."""
    limit = buffer_size - 1
    with open(path, encoding="utf-8", newline="\n") as handle:
        for line in handle:
            while len(line) > limit:
                yield line[:limit]
                line = line[limit:]
            yield line


def _block_lines(path: PathLike, block: str) -> Iterator[str]:
    """Yield the assignment lines found inside ``block { ... }`` sections."""
    in_block = False
    for line in _read_chunks(path, _BLOCK_LINE_BUFFER):
        stripped = line.lstrip(" \t")
        if stripped.startswith(block) and "{" in stripped:
            in_block = True
            continue
        if in_block and "}" in stripped:
            in_block = False
            continue
        if in_block and "=" in stripped:
            yield stripped


def _is_true(value: str) -> bool:
    return value.startswith("true") or value.startswith("1")


@dataclass
class Colors:
    """Theme colours."""

    border: str = ""
    focus: str = ""
    panel: str = ""
    acent: str = ""


@dataclass
class Keybind:
    """A key combination and the action it triggers."""

    key: str
    action: str


@dataclass
class Config:
    """All settings edited by the settings application."""

    tiling: bool = False
    quotes: bool = False
    colors: Colors = field(default_factory=Colors)
    keybinds: list[Keybind] = field(default_factory=list)
    launcher_cmd: str = ""
    exec_once: list[str] = field(default_factory=list)

    def load_config(self, path: PathLike) -> None:
        """Read the launcher command and exec-once entries."""
        exec_once: list[str] = []
        for line in _read_chunks(path, _CONFIG_LINE_BUFFER):
            match = _LAUNCHER_RE.match(line)
            if match:
                self.launcher_cmd = match.group(1)
                continue
            match = _EXEC_ONCE_RE.match(line)
            if match and len(exec_once) < MAX_EXEC_ONCE:
                exec_once.append(match.group(1))
        self.exec_once = exec_once

    def save_config(self, path: PathLike) -> None:
        """Write the launcher command and exec-once entries."""
        with open(path, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(f'launcher-command = "{self.launcher_cmd}"\n')
            for command in self.exec_once:
                handle.write(f'exec-once = "{command}"\n')

    def load_features(self, path: PathLike) -> None:
        """Read the ``features`` block."""
        for line in _block_lines(path, "features"):
            match = _ASSIGN_RE.match(line)
            if not match:
                continue
            key, value = match.groups()
            if key.startswith("tiling"):
                self.tiling = _is_true(value)
            elif key.startswith("quotes"):
                self.quotes = _is_true(value)

    def save_features(self, path: PathLike) -> None:
        """Write the ``features`` block."""
        with open(path, "w", encoding="utf-8", newline="\n") as handle:
            handle.write("features {\n")
            handle.write(f"  tiling = {'true' if self.tiling else 'false'}\n")
            handle.write(f"  quotes = {'true' if self.quotes else 'false'}\n")
            handle.write("}\n")

    def load_theme(self, path: PathLike) -> None:
        """Read the ``colors`` block."""
        for line in _block_lines(path, "colors"):
            match = _ASSIGN_RE.match(line)
            if not match:
                continue
            key, value = match.groups()
            value = value[: MAX_COLOR_LEN - 1]
            if key.startswith("border"):
                self.colors.border = value
            elif key.startswith("focus"):
                self.colors.focus = value
            elif key.startswith("panel"):
                self.colors.panel = value
            elif key.startswith("acent"):
                self.colors.acent = value

    def save_theme(self, path: PathLike) -> None:
        """Write the ``colors`` block."""
        with open(path, "w", encoding="utf-8", newline="\n") as handle:
            handle.write("colors {\n")
            handle.write(f"  border = {self.colors.border}\n")
            handle.write(f"  focus = {self.colors.focus}\n")
            handle.write(f"  panel = {self.colors.panel}\n")
            handle.write(f"  acent = {self.colors.acent}\n")
            handle.write("}\n")

    def load_keybinds(self, path: PathLike) -> None:
        """Read the ``keybinds`` block."""
        keybinds: list[Keybind] = []
        for line in _block_lines(path, "keybinds"):
            match = _KEYBIND_RE.match(line)
            if match and len(keybinds) < MAX_BINDS:
                keybinds.append(Keybind(match.group(1), match.group(2)))
        self.keybinds = keybinds

    def save_keybinds(self, path: PathLike) -> None:
        """Write the ``keybinds`` block."""
        with open(path, "w", encoding="utf-8", newline="\n") as handle:
            handle.write("keybinds {\n")
            for bind in self.keybinds:
                handle.write(f'  {bind.key} = "{bind.action}"\n')
            handle.write("}\n")

    def to_dict(self) -> dict:
        """Return the settings as a JSON-ready dictionary."""
        return {
            "tiling": int(self.tiling),
            "quotes": int(self.quotes),
            "colors": {
                "border": self.colors.border,
                "focus": self.colors.focus,
                "panel": self.colors.panel,
                "acent": self.colors.acent,
            },
            "launcher_cmd": self.launcher_cmd,
            "exec_once": list(self.exec_once),
            "keybinds": [
                {"key": bind.key, "action": bind.action} for bind in self.keybinds
            ],
        }