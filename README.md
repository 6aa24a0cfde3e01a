# demux

A small toolkit for working with tmux sessions from Python.

It covers these jobs:

- **Querying tmux** – list every pane across all sessions, parse the
  `list-panes` output, group panes by session and window, and find the most
  recent activity per session (`demux.tmux`).
- **Launching sessions** – create a detached session rooted at a directory,
  switch the client to it, and lay out its windows from a list of
  `WindowSpec` values (`demux.tmux.new_session`,
  `demux.tmux.create_session_windows`).
- **Session configuration** – read `sessions.toml` and `private.toml` from a
  config directory, resolve `[[window_templates]]` with single-level `from`
  inheritance, and append or remove `[[session]]` blocks without disturbing
  the rest of the file (`demux.sessions_file`).
- **Merging and bookkeeping** – combine live panes with configured entries
  into one list of sessions (`demux.session.merge`), and find alerts whose
  pane, window or session target no longer exists (`demux.targets`).
- **Key map and help text** – the key bindings (`demux.keys.KEYS`,
  `demux.keys.all_key_defs`) and a scrollable, boxed plain-text help overlay
  built from them (`demux.help.HelpModel`).

## Requirements

Python 3.11 or later, with no third-party dependencies. The functions that
talk to tmux need the `tmux` binary on `PATH`; everything else works without
it.

## Parsing panes

```python
from demux import tmux

raw = (
    "mysession\t0\t0\t/home/dev/project\t%1\teditor\n"
    "mysession\t0\t1\t/home/dev/project/ui\t%2\teditor\n"
    "mysession\t1\t0\t/home/dev/project\t%3\tserver\n"
)
panes = tmux.parse_panes(raw)
grouped = tmux.group_by_sessions(panes)
# grouped["mysession"][0] holds the two panes of window 0

cwd = tmux.primary_pane_cwd(grouped["mysession"][0])
# "/home/dev/project"

session_name, window_index = tmux.parse_current_target("myproject\t3\n")
```

Against a running server, `tmux.list_panes()` and `tmux.current_target()`
do the same from live output, and `tmux.switch_client(target)` moves the
client. Failures from tmux, and malformed target output, are raised as
`tmux.TmuxError`.

## Session configuration

Sessions are described in `sessions.toml` (and, for entries you keep out of
version control, `private.toml` in the same directory):

```toml
[[window_templates]]
id               = "editor"
name             = "Editor"
after_create_cmd = "nvim ."

[[window_templates]]
id   = "shell"
name = "Shell"
from = "editor"

[[session]]
name    = "dotf-main"
group   = "dotf"
path    = "/home/dev/dotfiles"
windows = ["editor", "shell"]
```

```python
from demux import session, sessions_file, tmux

cfg = sessions_file.load_config_sessions("/home/dev/.config/demux")
entry = cfg.entries[0]

specs, unknown = session.resolve_window_specs(entry.windows, cfg.window_templates)
tmux.new_session(entry.name, entry.path)
tmux.create_session_windows(entry.name, entry.path, specs)

sessions = session.merge(tmux.list_panes(), cfg.entries)
```

Missing files are ignored. Entries missing a name or a path are skipped with
a message on standard error; a later entry with the same name replaces an
earlier one, so `private.toml` overrides `sessions.toml`. A template whose
`from` names an unknown id is kept as written.

Adding and removing entries:

```python
from demux.session import ConfigEntry
from demux import sessions_file

path = "/home/dev/.config/demux/sessions.toml"
sessions_file.append_entry(path, ConfigEntry(name="proj-main", group="proj", path="/home/dev/proj"))
sessions_file.remove_entry(path, "proj-main")
```

`append_entry` refuses a name that is already present, and `remove_entry`
fails when the file or the entry is missing; both raise
`sessions_file.SessionConfigError`. `sessions_file.format_block(entry)`
returns the text that `append_entry` writes.

## Stale alerts

```python
from demux import targets

stale = targets.stale_alert_targets(panes, alerts)
count = targets.count_session_alerts(alerts, "mysession")
```

An alert is any object with `target` and `sticky` attributes. Targets take
the tmux forms `session`, `session:window` and `session:window.pane`. Sticky
alerts are never reported as stale, and with no live panes nothing is.

## Help overlay

```python
from demux.help import HelpModel

help_view = HelpModel()
print(help_view.render())      # whole overlay
print(help_view.render(20))    # clipped to 20 rows, scrolled by scroll_down/scroll_up
```

## What it does not do

This is a library only. It has no command to run and no interactive
full-screen interface; the help overlay is returned as plain text for a
caller to draw. It does not store alerts anywhere — the alert functions
work on objects you pass in — and it does not inspect processes running
inside panes.