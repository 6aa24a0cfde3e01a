"""Key bindings and their placement in the help overlay."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyDef:
    """A key binding with its help text, help section and display order.

    An empty ``section`` keeps the binding out of the help overlay. A binding
    with no ``keys`` is display-only: it documents other bindings in the help.
    """

    keys: tuple[str, ...]
    help_key: str
    help_desc: str
    section: str = ""
    order: int = 0

    def matches(self, key: str) -> bool:
        """Report whether the key string ``key`` triggers this binding."""
        return key in self.keys


_NAVIGATE_HELP = "j/k · ctrl+j/n · ctrl+k/p"
_TAB_HELP = "Tab/Shift+Tab"

KEYS: dict[str, KeyDef] = {
    # Global
    "focus_sidebar": KeyDef(("h",), "h", "sidebar"),
    "focus_proc_list": KeyDef(("l",), "l", "procs"),
    "focus_sidebar_list": KeyDef((), "h / l", "focus sidebar / process list", "Global", 1),
    "yank": KeyDef(("y",), "y", "yank menu", "Global", 2),
    "filter_search": KeyDef((), "f", "filter", "Global", 3),
    "clear_filter": KeyDef((), "ctrl+u", "clear filter", "Global", 4),
    "refresh": KeyDef(("R",), "R", "force refresh", "Global", 5),
    "help": KeyDef(("?",), "?", "toggle help", "Global", 6),
    "quit": KeyDef(("q", "ctrl+c"), "q", "quit", "Global", 7),
    # Navigation
    "navigate": KeyDef((), _NAVIGATE_HELP, "navigate", "Navigation", 1),
    "up": KeyDef(("k", "up", "ctrl+k", "ctrl+p"), _NAVIGATE_HELP, "navigate"),
    "down": KeyDef(("j", "down", "ctrl+j", "ctrl+n"), _NAVIGATE_HELP, "navigate"),
    "tab": KeyDef(("tab",), _TAB_HELP, "cycle (wraps)", "Navigation", 2),
    "shift_tab": KeyDef(("shift+tab",), _TAB_HELP, "cycle (wraps)"),
    "goto_top": KeyDef(("g",), "g", "top", "Navigation", 3),
    "goto_bottom": KeyDef(("G",), "G", "bottom", "Navigation", 4),
    # Sidebar
    "enter": KeyDef(("enter",), "Enter", "attach to session", "Sidebar", 1),
    "open": KeyDef(("o", "ctrl+o"), "o / ctrl+o", "attach to session / window", "Sidebar", 2),
    "esc": KeyDef(("esc",), "Esc", "back to session level", "Sidebar", 3),
    "defer": KeyDef(("d",), "d", "defer", "Sidebar", 4),
    "defer_sticky": KeyDef(("D",), "D", "defer (sticky)", "Sidebar", 5),
    # Filters
    "filter_tmux": KeyDef(("t",), "t", "tmux sessions only (default)", "Filters", 1),
    "filter_all": KeyDef(("a",), "a", "all sessions (tmux + config)", "Filters", 2),
    "filter_config": KeyDef(("c",), "c", "config sessions only", "Filters", 3),
    "filter_worktree": KeyDef(("w",), "w", "sessions in current worktree", "Filters", 4),
    "alert_filter": KeyDef(("!",), "!", "alert filter", "Filters", 5),
    # Process list
    "jump_up_down": KeyDef((), "J / K", "jump to next/prev pane", "Process list", 1),
    "jump_up": KeyDef(("K",), "K", "jump up"),
    "jump_down": KeyDef(("J",), "J", "jump down"),
    "expand_collapse": KeyDef((), "] / [", "expand / collapse group", "Process list", 2),
    "expand": KeyDef(("]",), "]", "expand"),
    "collapse": KeyDef(("[",), "[", "collapse"),
    "expand_collapse_all": KeyDef((), "} / {", "expand / collapse all", "Process list", 3),
    "expand_all": KeyDef(("}",), "}", "expand all"),
    "collapse_all": KeyDef(("{",), "{", "collapse all"),
    "proc_enter": KeyDef((), "Enter", "toggle expand / collapse", "Process list", 4),
    "proc_open": KeyDef((), "o / ctrl+o", "attach to pane", "Process list", 5),
    "kill": KeyDef(("x",), "x", "kill process", "Process list", 6),
    "restart": KeyDef(("r",), "r", "restart process", "Process list", 7),
    "log": KeyDef(("L",), "L", "open log popup", "Process list", 8),
}

_HELP_ORDER = (
    # Global
    "focus_sidebar_list", "yank", "filter_search", "clear_filter",
    "refresh", "help", "quit",
    # Navigation
    "navigate", "tab", "goto_top", "goto_bottom",
    # Sidebar
    "enter", "open", "esc", "defer", "defer_sticky",
    # Filters
    "filter_tmux", "filter_all", "filter_config", "filter_worktree", "alert_filter",
    # Process list
    "jump_up_down", "expand_collapse", "expand_collapse_all",
    "proc_enter", "proc_open", "kill", "restart", "log",
)


def all_key_defs() -> list[KeyDef]:
    """Return the bindings shown in the help overlay, in display order."""
    return [KEYS[name] for name in _HELP_ORDER]