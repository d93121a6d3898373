# silentcast

Building blocks for a hotkey task runner. You describe *spells* (key
sequences such as `e` or `g,s`) and a *grimoire* (what each spell does:
launch an application or run a script) in a YAML spellbook. silentcast
loads and validates the spellbook, parses and checks key sequences, runs
the configured actions and reloads the spellbook when its files change.

Requires Python 3.10 or later. Install with `pip install .`; the test
dependencies are in the `test` extra (`pip install .[test]`).

## The spellbook

A configuration directory holds a common `spellbook.yml` and, optionally, a
platform file (`spellbook.mac.yml`, `spellbook.linux.yml` or
`spellbook.windows.yml`) whose values are merged over the common ones.

```yaml
daemon:
  log_level: info

hotkeys:
  prefix: "alt+space"
  timeout: 1000          # milliseconds
  sequence_timeout: 2000 # milliseconds

spells:
  e: editor
  "g,s": git_status

grimoire:
  editor:
    type: app
    command: /usr/bin/vim
    description: Launch vim
  git_status:
    type: script
    command: git status
    working_dir: $HOME/projects
```

When at least one file is found, defaults fill unset values: log level
`info`, prefix `alt+space` (unless `prefix` is given, even as an empty
string), timeouts of 1000 and 2000 ms, and logger settings (level `info`,
`max_size` 10, `max_backups` 3, `max_age` 7).

Validation then requires that a prefix is set (so a directory with no
spellbook at all fails to load), that every spell names an existing
grimoire entry, that each entry has a `type` of `app` or `script` and a
`command`, and that the daemon log level is one of `debug`, `info`, `warn`
or `error`.

The top-level key names can be changed, for example to another language,
with `silentcast.settings.KeyNames`; `silentcast.loader.map_custom_keys`
renames them back to the standard names while loading.

## Loading configuration

```python
from silentcast.loader import Loader, ConfigLoadError

try:
    config = Loader("/path/to/config/dir").load()
except ConfigLoadError as exc:
    print(f"bad spellbook: {exc}")

print(config.hotkeys.prefix, config.hotkeys.timeout)
```

`Loader` also takes `keys` (a `KeyNames`) and `resolver` (a
`PlatformResolver`); by default it uses the standard names and
`get_platform_resolver()` for the running platform. The result is a
`silentcast.settings.Config` with `daemon`, `hotkeys`, `shortcuts`,
`actions`, `logger` and `updater` sections.

## Key sequences

```python
from silentcast.keys import get_key_mapper
from silentcast.parser import Parser
from silentcast.validator import Validator

parser = Parser(get_key_mapper())
sequence = parser.parse("ctrl+g,s")
print(str(sequence))        # "ctrl+g,s"

validator = Validator(parser)
validator.register("g,s", "git_status")
validator.validate("g", "other")   # raises ValidationError: conflicts with longer sequence
```

Sequential keys are separated by commas, modifiers are joined with `+`, and
input is case-insensitive. Modifier aliases follow the platform's key
mapper (`DarwinKeyMapper`, `LinuxKeyMapper`, `WindowsKeyMapper`): for
example `option` becomes `alt` on macOS and `cmd` becomes `super` on Linux.
Invalid input raises `ParseError`; duplicate and prefix-conflicting
registrations raise `ValidationError`.

## Running actions

```python
from silentcast.executors import ActionManager, ActionError

manager = ActionManager(config.actions)
try:
    manager.execute("git_status")
except ActionError as exc:
    print(exc)
```

`$NAME` and `${NAME}` in commands, working directories and `env` values are
expanded from the environment (unset names become empty). Applications are
started detached. Scripts run through the platform shell, or directly when
`args` are given, in the working directory or else the home directory.
Scripts starting with `git`, `echo`, `date`, `pwd`, `ls`, `true` or `false`
are waited for, and a non-zero exit raises `ActionError`; other scripts are
left running. Commands that look interactive (`vim`, `nano`, `htop`, ...)
are wrapped to open in a terminal window where the platform offers one.

## Watching for changes

```python
from silentcast.watcher import ConfigWatcher, WatcherConfig

with ConfigWatcher(WatcherConfig("/path/to/config/dir", on_change=print, debounce=0.2)):
    ...
```

`ConfigWatcher` reloads the spellbook when one of its files is written or
created, waiting for `debounce` seconds (0.5 by default) of quiet, and
passes the new `Config` to `on_change`. Files that fail to load are logged
and skipped.

## Errors

`silentcast.errors` provides `SpellbookError` with an `ErrorType`, plus
`wrap`, `is_type` and `get_user_message`, which turns any exception into a
short message for the user. `ActionError` is a `SpellbookError` of type
`EXECUTION`.

## What it does not do

silentcast has no command-line program and no system keyboard hook: it does
not listen for key presses by itself. `silentcast.mock.create_manager`
returns a `MockManager`, an in-memory `HotkeyManager` whose key presses are
delivered by calling `simulate_key_press`. There is also no system tray,
desktop notifications, permission checks or log file handling.