import json
from pathlib import Path

import pytest

from mochasettings.bridge import Bridge
from mochasettings.config import Colors, Config, Keybind
from mochasettings.settings import ConfigPaths, SettingsService, default_home, strescape


class FakeWebView:
    def __init__(self):
        self.scripts = []

    def evaluate_javascript(self, script):
        self.scripts.append(script)


@pytest.fixture
def service(tmp_path):
    (tmp_path / ".config" / "mocha").mkdir(parents=True)
    return SettingsService(ConfigPaths(str(tmp_path)), Config())


def _inner(script, prefix, suffix):
    assert script.startswith(prefix)
    assert script.endswith(suffix)
    return script[len(prefix) : -len(suffix)]


def test_default_home_uses_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert default_home() == str(tmp_path)


def test_config_paths(tmp_path):
    paths = ConfigPaths(str(tmp_path))
    assert paths.file("x.mconf") == tmp_path / ".config" / "mocha" / "x.mconf"
    assert paths.config.name == "config.mconf"
    assert paths.features.name == "features.mconf"
    assert paths.theme.name == "theme.mconf"
    assert paths.keybinds.name == "keybinds.mconf"


def test_strescape_simple():
    assert strescape('a\nb\t"c"\\') == 'a\\nb\\t\\"c\\"\\\\'
    assert strescape("plain text") == "plain text"


def test_strescape_octal():
    assert strescape("\x01") == "\\001"
    assert strescape("é") == "\\303\\251"
    assert strescape(b"ab\0cd") == "ab"


def test_load_all_missing_files(service):
    service.load_all()
    assert service.config == Config()


def test_config_script_carries_dict(service):
    service.config.launcher_cmd = "wofi"
    service.config.exec_once = ["a", "b"]
    script = service.config_script()
    inner = _inner(script, "window.setConfigFromNative(", ");")
    assert json.loads(inner) == service.config.to_dict()


def test_config_script_is_bounded(service):
    service.config.exec_once = ["x" * 250] * 32
    assert len(service.config_script().encode("utf-8")) == 4095


def test_handle_get_config(service):
    view = FakeWebView()
    service.handle_get_config(view, None)
    assert view.scripts == [service.config_script()]


def test_read_file_sends_escaped_content(service):
    target = service.paths.file("notes.mconf")
    target.write_text('line "one"\nline two\n', encoding="utf-8")
    view = FakeWebView()
    service.handle_read_file(view, json.dumps({"file": "notes.mconf"}))
    assert view.scripts == [
        "window.setEditorContent(`" + strescape('line "one"\nline two\n') + "`);"
    ]


def test_read_file_key_is_case_insensitive(service):
    service.paths.file("a.mconf").write_text("abc", encoding="utf-8")
    view = FakeWebView()
    service.handle_read_file(view, '{"FILE":"a.mconf"}')
    assert view.scripts == ["window.setEditorContent(`abc`);"]


def test_read_missing_file_reports_error(service, capsys):
    view = FakeWebView()
    service.handle_read_file(view, json.dumps({"file": "missing.mconf"}))
    assert len(view.scripts) == 1
    assert view.scripts[0].startswith("window.setEditorContent(`/* Error loading file: ")
    assert "missing.mconf" in view.scripts[0]
    assert "Failed to read file" in capsys.readouterr().err


@pytest.mark.parametrize("payload", [None, "not json", "[1]", '{"file": 3}', "{}"])
def test_read_file_ignores_bad_payload(service, payload):
    view = FakeWebView()
    service.handle_read_file(view, payload)
    assert view.scripts == []


def test_write_then_read(service):
    view = FakeWebView()
    service.handle_write_file(
        view, json.dumps({"file": "out.mconf", "content": "hello\nworld"})
    )
    assert service.paths.file("out.mconf").read_text(encoding="utf-8") == "hello\nworld"
    service.handle_read_file(view, json.dumps({"file": "out.mconf"}))
    assert view.scripts == ["window.setEditorContent(`hello\\nworld`);"]


def test_write_replaces_existing(service):
    target = service.paths.file("x.mconf")
    target.write_text("old", encoding="utf-8")
    service.handle_write_file(FakeWebView(), json.dumps({"file": "x.mconf", "content": "new"}))
    assert target.read_text(encoding="utf-8") == "new"
    assert sorted(p.name for p in target.parent.iterdir()) == ["x.mconf"]


def test_write_requires_content(service):
    service.handle_write_file(FakeWebView(), json.dumps({"file": "y.mconf"}))
    assert not service.paths.file("y.mconf").exists()


def test_write_failure_reported(tmp_path, capsys):
    svc = SettingsService(ConfigPaths(str(tmp_path / "nohome")), Config())
    svc.handle_write_file(FakeWebView(), json.dumps({"file": "z.mconf", "content": "c"}))
    assert "Failed to write file" in capsys.readouterr().err
    assert not Path(svc.paths.file("z.mconf")).exists()


def test_register_with_bridge(service):
    bridge = Bridge()
    service.register(bridge)
    view = FakeWebView()
    message = json.dumps(
        {"action": "write_file", "data": {"file": "b.mconf", "content": "data"}}
    )
    assert bridge.handle_message(view, message) is True
    assert service.paths.file("b.mconf").read_text(encoding="utf-8") == "data"
    assert bridge.handle_message(view, json.dumps({"action": "get_config"})) is True
    assert view.scripts == [service.config_script()]