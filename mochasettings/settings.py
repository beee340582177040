"""Settings service: config file locations and the actions the front end calls."""

from __future__ import annotations

import json
import os
import secrets
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from mochasettings.bridge import Bridge
from mochasettings.config import Config

# The script sent to the page is built in a fixed-size buffer of this many
# bytes, the last of which holds the terminator.
_SCRIPT_BUFFER = 4096

_SIMPLE_ESCAPES = {
    ord("\b"): "\\b",
    ord("\f"): "\\f",
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
    ord("\v"): "\\v",
    ord("\\"): "\\\\",
    ord('"'): '\\"',
}


class ScriptTarget(Protocol):
    """Anything that can run a piece of JavaScript in the page."""

    def evaluate_javascript(self, script: str) -> None: ...


def default_home() -> str:
    """Return ``$HOME``, or the home directory from the password database."""
    home = os.environ.get("HOME")
    if home:
        return home
    import pwd

    return pwd.getpwuid(os.getuid()).pw_dir


def strescape(text: Union[str, bytes]) -> str:
    """Escape text as a C string literal body.

    Common control characters become backslash escapes, other bytes below
    space or from 0x7f up become three-digit octal escapes. Text stops at
    the first NUL.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    data = data.split(b"\0", 1)[0]
    parts = []
    for byte in data:
        if byte in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[byte])
        elif byte < 0x20 or byte >= 0x7F:
            parts.append(f"\\{byte:03o}")
        else:
            parts.append(chr(byte))
    return "".join(parts)


def _member(obj: Any, name: str) -> Any:
    """Return an object member looked up without regard to case, or None."""
    if not isinstance(obj, dict):
        return None
    wanted = name.lower()
    for key, value in obj.items():
        if key.lower() == wanted:
            return value
    return None


def _parse(payload: Optional[str]) -> Any:
    if payload is None:
        return None
    try:
        return json.loads(payload)
    except ValueError:
        return None


def _write_atomically(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` via a temporary file and a rename."""
    tmp = path.with_name(f"{path.name}.{secrets.token_hex(4)}")
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content.encode("utf-8"))
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


@dataclass
class ConfigPaths:
    """Locations of the files under ``~/.config/mocha``."""

    home: str = field(default_factory=default_home)

    def file(self, name: str) -> Path:
        """Return the path of ``name`` inside the config directory."""
        return Path(f"{self.home}/.config/mocha/{name}")

    @property
    def config(self) -> Path:
        return self.file("config.mconf")

    @property
    def features(self) -> Path:
        return self.file("features.mconf")

    @property
    def theme(self) -> Path:
        return self.file("theme.mconf")

    @property
    def keybinds(self) -> Path:
        return self.file("keybinds.mconf")


class SettingsService:
    """Holds the settings and answers the front end's requests."""

    def __init__(
        self, paths: Optional[ConfigPaths] = None, config: Optional[Config] = None
    ) -> None:
        self.paths = paths if paths is not None else ConfigPaths()
        self.config = config if config is not None else Config()

    def load_all(self) -> None:
        """Load every settings file; files that cannot be opened are skipped."""
        loaders = (
            (self.config.load_config, self.paths.config),
            (self.config.load_features, self.paths.features),
            (self.config.load_theme, self.paths.theme),
            (self.config.load_keybinds, self.paths.keybinds),
        )
        for load, path in loaders:
            try:
                load(path)
            except OSError:
                continue

    def config_script(self) -> str:
        """Return the script that hands the settings to the page."""
        payload = json.dumps(
            self.config.to_dict(), separators=(",", ":"), ensure_ascii=False
        )
        script = f"window.setConfigFromNative({payload});"
        encoded = script.encode("utf-8")
        if len(encoded) >= _SCRIPT_BUFFER:
            script = encoded[: _SCRIPT_BUFFER - 1].decode("utf-8", errors="ignore")
        return script

    def handle_get_config(self, webview: ScriptTarget, payload: Optional[str]) -> None:
        """Send the current settings to the page."""
        webview.evaluate_javascript(self.config_script())

    def handle_read_file(self, webview: ScriptTarget, payload: Optional[str]) -> None:
        """Send the contents of the requested config file to the editor."""
        name = _member(_parse(payload), "file")
        if not isinstance(name, str):
            return
        path = self.paths.file(name)
        try:
            content = path.read_bytes()
        except OSError as err:
            message = f"Failed to open file “{path}”: {err.strerror}"
            print(f"Failed to read file {path}: {message}", file=sys.stderr)
            webview.evaluate_javascript(
                f"window.setEditorContent(`/* Error loading file: {message} */`);"
            )
            return
        webview.evaluate_javascript(f"window.setEditorContent(`{strescape(content)}`);")

    def handle_write_file(self, webview: ScriptTarget, payload: Optional[str]) -> None:
        """Replace the requested config file with the given content."""
        root = _parse(payload)
        name = _member(root, "file")
        content = _member(root, "content")
        if not isinstance(name, str) or not isinstance(content, str):
            return
        path = self.paths.file(name)
        try:
            _write_atomically(path, content.split("\0", 1)[0])
        except OSError as err:
            print(f"Failed to write file {path}: {err.strerror}", file=sys.stderr)

    def register(self, bridge: Bridge) -> None:
        """Register this service's actions with ``bridge``."""
        bridge.register_action("get_config", self.handle_get_config)
        bridge.register_action("read_file", self.handle_read_file)
        bridge.register_action("write_file", self.handle_write_file)