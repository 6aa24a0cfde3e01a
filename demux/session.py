"""Session model: config entries, window templates and merging with live tmux panes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from demux.tmux import Pane, WindowSpec, group_by_sessions, session_activity_map


@dataclass
class WindowTemplate:
    """A reusable window configuration from the sessions file."""

    id: str = ""
    name: str = ""
    after_create_cmd: str = ""
    from_id: str = ""


@dataclass
class ConfigEntry:
    """A session declared in sessions.toml or private.toml."""

    name: str = ""
    path: str = ""
    worktree: bool = False
    group: str = ""
    labels: list[str] = field(default_factory=list)
    icon: str = ""
    windows: list[str] = field(default_factory=list)

    def display_name(self) -> str:
        """Return the identifier used for this session in tmux and in the sidebar."""
        return self.name


@dataclass
class Session:
    """A session as shown in the sidebar: live in tmux, configured, or both."""

    display_name: str
    is_live: bool = False
    is_config: bool = False
    panes: dict[int, list[Pane]] = field(default_factory=dict)
    activity: datetime | None = None
    config: ConfigEntry | None = None


def resolve_window_specs(
    ids: Iterable[str], templates: Mapping[str, WindowTemplate]
) -> tuple[list[WindowSpec], list[str]]:
    """Map template ids to window specs; return the specs and the ids not found."""
    specs: list[WindowSpec] = []
    unknown: list[str] = []
    for template_id in ids:
        template = templates.get(template_id)
        if template is None:
            unknown.append(template_id)
            continue
        specs.append(WindowSpec(name=template.name, after_create_cmd=template.after_create_cmd))
    return specs, unknown


def merge(panes: Iterable[Pane] | None, entries: Sequence[ConfigEntry] | None) -> list[Session]:
    """Combine live panes and config entries; a tmux session matches an entry by exact name."""
    pane_list = list(panes or ())
    entry_list = list(entries or ())
    grouped = group_by_sessions(pane_list)
    activity = session_activity_map(pane_list)
    config_by_name = {entry.display_name(): entry for entry in entry_list}

    sessions: list[Session] = []
    matched: set[str] = set()
    for name, windows in grouped.items():
        entry = config_by_name.get(name)
        if entry is not None:
            matched.add(name)
        sessions.append(
            Session(
                display_name=name,
                is_live=True,
                is_config=entry is not None,
                panes=windows,
                activity=activity.get(name),
                config=entry,
            )
        )

    for entry in entry_list:
        name = entry.display_name()
        if name not in matched:
            sessions.append(Session(display_name=name, is_live=False, is_config=True, config=entry))
    return sessions