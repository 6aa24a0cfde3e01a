"""Querying and driving tmux: pane listing, session launch and client switching."""

from __future__ import annotations

import os
import subprocess
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

PANE_FORMAT = "\t".join(
    (
        "#{session_name}",
        "#{window_index}",
        "#{pane_index}",
        "#{pane_current_path}",
        "#{pane_id}",
        "#{window_name}",
        "#{pane_pid}",
        "#{session_activity}",
    )
)
TARGET_FORMAT = "#{session_name}\t#{window_index}"

_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


class TmuxError(Exception):
    """Raised when a tmux command fails or its output cannot be understood."""


@dataclass
class Pane:
    """One tmux pane as reported by ``tmux list-panes``."""

    session: str = ""
    window_index: int = 0
    pane_index: int = 0
    cwd: str = ""
    pane_id: str = ""
    window_name: str = ""
    pane_pid: int = 0
    session_activity: int = 0


@dataclass(frozen=True)
class WindowSpec:
    """A window to create inside a tmux session."""

    name: str
    after_create_cmd: str = ""


def _run(label: str, *args: str) -> str:
    """Run tmux with ``args`` and return its standard output."""
    try:
        result = subprocess.run(
            ["tmux", *args], check=True, capture_output=True, text=True
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise TmuxError(f"{label}: {exc}") from exc
    return result.stdout or ""


def _parse_int(text: str, low: int | None = None, high: int | None = None) -> int | None:
    """Parse a plain decimal integer, returning None when it is malformed or out of range."""
    body = text[1:] if text[:1] in "+-" else text
    if not body or not body.isascii() or not body.isdigit():
        return None
    value = int(text)
    if low is not None and value < low:
        return None
    if high is not None and value > high:
        return None
    return value


def list_panes() -> list[Pane]:
    """Return every pane across all tmux sessions."""
    return parse_panes(_run("tmux list-panes", "list-panes", "-a", "-F", PANE_FORMAT))


def parse_panes(raw: str) -> list[Pane]:
    """Parse tab-separated ``list-panes`` output; short or blank lines are skipped."""
    panes: list[Pane] = []
    for line in raw.split("\n"):
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) < 4:
            continue
        pane = Pane(
            session=parts[0],
            window_index=_parse_int(parts[1]) or 0,
            pane_index=_parse_int(parts[2]) or 0,
            cwd=parts[3],
        )
        if len(parts) >= 5:
            pane.pane_id = parts[4]
        if len(parts) >= 6:
            pane.window_name = parts[5]
        if len(parts) >= 7:
            pid = _parse_int(parts[6].strip(), _INT32_MIN, _INT32_MAX)
            if pid is not None:
                pane.pane_pid = pid
        if len(parts) >= 8:
            ts = _parse_int(parts[7].strip(), _INT64_MIN, _INT64_MAX)
            if ts is not None:
                pane.session_activity = ts
        panes.append(pane)
    return panes


def group_by_sessions(panes: Iterable[Pane]) -> dict[str, dict[int, list[Pane]]]:
    """Organise panes by session name, then by window index."""
    grouped: dict[str, dict[int, list[Pane]]] = {}
    for pane in panes:
        windows = grouped.setdefault(pane.session, defaultdict(list))
        windows[pane.window_index].append(pane)
    return {name: dict(windows) for name, windows in grouped.items()}


def session_activity_map(panes: Iterable[Pane]) -> dict[str, datetime]:
    """Return the most recent activity time per session; non-positive stamps are ignored."""
    latest: dict[str, int] = {}
    for pane in panes:
        if pane.session_activity <= 0:
            continue
        if pane.session_activity > latest.get(pane.session, 0):
            latest[pane.session] = pane.session_activity
    return {
        name: datetime.fromtimestamp(ts, tz=timezone.utc) for name, ts in latest.items()
    }


def parse_current_target(raw: str) -> tuple[str, int]:
    """Parse ``session<TAB>window`` output into a (session, window index) pair."""
    raw = raw.strip()
    if not raw:
        raise TmuxError("empty output")
    parts = raw.split("\t", 1)
    if len(parts) < 2:
        raise TmuxError(f"unexpected format: {raw!r}")
    window = _parse_int(parts[1].strip())
    if window is None:
        raise TmuxError(f"invalid window index: {parts[1].strip()!r}")
    return parts[0], window


def current_target() -> tuple[str, int]:
    """Return the session name and window index of the current tmux client."""
    return parse_current_target(
        _run("tmux display-message", "display-message", "-p", TARGET_FORMAT)
    )


def switch_client(target: str) -> None:
    """Switch the tmux client to ``target``."""
    _run("tmux switch-client", "switch-client", "-t", target)


def primary_pane_cwd(panes: Sequence[Pane] | None) -> str:
    """Return the CWD of pane index 0, else of the first pane, else an empty string."""
    if not panes:
        return ""
    for pane in panes:
        if pane.pane_index == 0:
            return pane.cwd
    return panes[0].cwd


def new_session(name: str, path: str) -> None:
    """Create a detached session ``name`` rooted at ``path`` and switch to it."""
    if not name:
        raise TmuxError("session name is required")
    if not path:
        raise TmuxError("session path is required")
    try:
        os.stat(path)
    except OSError as exc:
        raise TmuxError(f"session path {path!r}: {exc}") from exc
    _run("tmux new-session", "new-session", "-d", "-s", name, "-c", path)
    _run("tmux switch-client", "switch-client", "-t", name)


def create_session_windows(
    session_name: str, path: str, windows: Sequence[WindowSpec] | None
) -> None:
    """Rename the default window to the first spec and create the remaining windows."""
    for index, spec in enumerate(windows or ()):
        if index == 0:
            _run(
                f"tmux rename-window {spec.name!r}",
                "rename-window", "-t", f"{session_name}:0", spec.name,
            )
        else:
            _run(
                f"tmux new-window {spec.name!r}",
                "new-window", "-t", session_name, "-n", spec.name, "-c", path,
            )
            _run(
                f"tmux rename-window {spec.name!r}",
                "rename-window", "-t", f"{session_name}:{index}", spec.name,
            )
        if spec.after_create_cmd:
            _run(
                f"tmux send-keys {spec.name!r}",
                "send-keys", "-t", f"{session_name}:{index}", spec.after_create_cmd, "Enter",
            )