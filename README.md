# mochasettings

A library for the settings of the Mocha window manager. Mocha keeps its
configuration in `~/.config/mocha/` as four small `.mconf` files:

| File              | Contents                                                          |
|-------------------|-------------------------------------------------------------------|
| `config.mconf`    | `launcher-command = "..."` and `exec-once = "..."` lines          |
| `features.mconf`  | a `features { ... }` block with `tiling` and `quotes`             |
| `theme.mconf`     | a `colors { ... }` block with `border`, `focus`, `panel`, `acent` |
| `keybinds.mconf`  | a `keybinds { ... }` block of `key = "action"` lines              |

The package reads and writes each of them, and offers a small JSON message
bridge and a service that answers the requests of a web-based settings page.

## Reading and writing the configuration

`mochasettings.config` holds three dataclasses: `Colors` (`border`,
`focus`, `panel`, `acent`), `Keybind` (`key`, `action`) and `Config`
(`tiling`, `quotes`, `colors`, `keybinds`, `launcher_cmd`, `exec_once`).

```python
from pathlib import Path
from mochasettings.config import Config

base = Path.home() / ".config" / "mocha"

config = Config()
config.load_config(base / "config.mconf")
config.load_features(base / "features.mconf")
config.load_theme(base / "theme.mconf")
config.load_keybinds(base / "keybinds.mconf")

print(config.to_dict())

config.tiling = True
config.save_features(base / "features.mconf")
```

Each `load_*` method has a matching `save_*` method. Loading behaves like
the window manager's own reader:

* A file that cannot be opened raises `OSError`.
* Lines that do not have the expected shape are ignored.
* `tiling` and `quotes` are true when their value starts with `true` or `1`.
* At most 32 `exec-once` commands (`MAX_EXEC_ONCE`) and 32 keybinds
  (`MAX_BINDS`) are kept; further ones are dropped.
* Colour values are cut to 15 characters.
* Long lines are read in fixed-size pieces (63 characters in
  `config.mconf`, 255 in the block files), so text beyond that is treated
  as a separate line.

`Config.to_dict()` gives the JSON-ready structure sent to the page:
`tiling` and `quotes` as `0`/`1`, `colors` (with `border`, `focus`,
`panel`, `acent`), `launcher_cmd`, `exec_once` and `keybinds` (a list of
`key`/`action` objects).

## The message bridge

`mochasettings.bridge.Bridge` dispatches JSON messages of the form
`{"action": "<name>", "data": ...}` to registered handlers. A handler is
called with the web view passed to `handle_message` and the `data` value
re-encoded as compact JSON, or `None` when there is no `data`. Member names
are matched without regard to case. Messages that are not strings, not
valid JSON objects, have no string `action`, or name an unknown action are
ignored. `handle_message` returns `True` when a handler was called.

```python
from mochasettings.bridge import Bridge

def on_ping(webview, payload):
    print("ping with", payload)

bridge = Bridge()
bridge.register_action("ping", on_ping)
bridge.handle_message(None, '{"action": "ping", "data": {"n": 1}}')
```

Registering an action a second time replaces the earlier handler.

## The settings service

`mochasettings.settings` ties the two together.

* `ConfigPaths(home)` locates files under `<home>/.config/mocha/`:
  `file(name)` returns the path of any file there, and the properties
  `config`, `features`, `theme` and `keybinds` give the four `.mconf`
  files. `home` defaults to `default_home()`, which returns `$HOME` or,
  when it is unset, the home directory from the password database.
* `SettingsService(paths, config)` holds a `ConfigPaths` and a `Config`
  (new ones when not given). `load_all()` loads the four files, skipping
  any that cannot be opened. `register(bridge)` installs three actions:
  * `get_config` – runs `window.setConfigFromNative(<json>);` in the page
    (the script from `config_script()`, cut to at most 4095 bytes);
  * `read_file` – with `{"file": name}`, reads that file from the config
    directory and runs `window.setEditorContent(`...`);` with its text
    escaped by `strescape`, or with an error comment if it cannot be read
    (the error is also printed to standard error);
  * `write_file` – with `{"file": name, "content": text}`, replaces that
    file through a temporary file and a rename; a failure is printed to
    standard error.
* `strescape(text)` escapes text as the body of a C string literal:
  common control characters become `\n`, `\t` and the like, backslash and
  double quote are escaped, and other bytes below space or from 0x7f up
  become three-digit octal escapes. It stops at the first NUL.

The "web view" given to the handlers is any object with an
`evaluate_javascript(script)` method:

```python
from mochasettings.bridge import Bridge
from mochasettings.settings import ConfigPaths, SettingsService

class Page:
    def evaluate_javascript(self, script):
        print(script)

service = SettingsService(ConfigPaths("/home/someone"))
service.load_all()
bridge = Bridge()
service.register(bridge)
bridge.handle_message(Page(), '{"action": "get_config"}')
```

## What the package does not do

The package has no window, web view or settings page of its own, and no
command to start one. It does not render the front end or run
JavaScript. A caller that embeds a web view passes its messages to
`Bridge.handle_message` and supplies the object that runs the returned
scripts.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.