"""Alert target bookkeeping: which pane, window and session targets are live."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from demux.tmux import Pane


class _AlertLike(Protocol):
    target: str
    sticky: bool


def build_target_sets(panes: Iterable[Pane]) -> tuple[set[str], set[str], set[str]]:
    """Return the live pane (``s:w.p``), window (``s:w``) and session targets."""
    pane_targets: set[str] = set()
    win_targets: set[str] = set()
    ses_targets: set[str] = set()
    for pane in panes:
        pane_targets.add(f"{pane.session}:{pane.window_index}.{pane.pane_index}")
        win_targets.add(f"{pane.session}:{pane.window_index}")
        ses_targets.add(pane.session)
    return pane_targets, win_targets, ses_targets


def is_stale_alert(
    target: str,
    pane_targets: set[str],
    win_targets: set[str],
    ses_targets: set[str],
) -> bool:
    """Report whether ``target`` is absent from the live target set of its kind."""
    if "." in target:
        return target not in pane_targets
    if ":" in target:
        return target not in win_targets
    return target not in ses_targets


def stale_alert_targets(
    panes: Sequence[Pane] | None, alerts: Iterable[_AlertLike] | None
) -> list[str]:
    """Return targets of non-sticky alerts that no longer match a live pane.

    With no live panes at all nothing is considered stale.
    """
    if not panes:
        return []
    pane_targets, win_targets, ses_targets = build_target_sets(panes)
    return [
        alert.target
        for alert in alerts or ()
        if not alert.sticky
        and is_stale_alert(alert.target, pane_targets, win_targets, ses_targets)
    ]


def count_session_alerts(alerts: Iterable[_AlertLike] | None, session_name: str) -> int:
    """Count alerts whose target lies within ``session_name`` (a window or pane of it)."""
    prefix = session_name + ":"
    return sum(1 for alert in alerts or () if alert.target.startswith(prefix))