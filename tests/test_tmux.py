import subprocess
from unittest import mock

import pytest

from demux.tmux import (
    Pane,
    TmuxError,
    WindowSpec,
    create_session_windows,
    current_target,
    group_by_sessions,
    list_panes,
    new_session,
    parse_current_target,
    parse_panes,
    primary_pane_cwd,
    session_activity_map,
    switch_client,
)


def _completed(stdout=""):
    return subprocess.CompletedProcess(args=["tmux"], returncode=0, stdout=stdout, stderr="")


def _commands(run_mock):
    return [call.args[0] for call in run_mock.call_args_list]


# ---------- parse_panes ----------

def test_parse_panes():
    raw = (
        "mysession\t0\t0\t/home/dev/project\t%1\teditor\n"
        "mysession\t0\t1\t/home/dev/project/ui\t%2\teditor\n"
        "mysession\t1\t0\t/home/dev/project\t%3\tserver\n"
    )
    panes = parse_panes(raw)
    assert len(panes) == 3
    assert panes[0].session == "mysession"
    assert panes[1].pane_index == 1
    assert panes[1].cwd == "/home/dev/project/ui"
    assert panes[0].pane_id == "%1"
    assert panes[0].window_name == "editor"
    assert panes[2].window_index == 1


def test_parse_panes_empty():
    assert parse_panes("") == []


def test_parse_panes_with_session_activity():
    raw = "mysession\t0\t0\t/home/dev\t%1\teditor\t1234\t1711652000\n"
    panes = parse_panes(raw)
    assert len(panes) == 1
    assert panes[0].session_activity == 1711652000
    assert panes[0].pane_pid == 1234


def test_parse_panes_without_session_activity_backward_compat():
    raw = "mysession\t0\t0\t/home/dev\t%1\teditor\t1234\n"
    panes = parse_panes(raw)
    assert len(panes) == 1
    assert panes[0].session_activity == 0


def test_parse_panes_skips_short_lines_and_bad_numbers():
    raw = "short\t0\t0\nsess\tx\t1\t/tmp\t%9\tw\tnotapid\tbad\n"
    panes = parse_panes(raw)
    assert panes == [Pane(session="sess", window_index=0, pane_index=1, cwd="/tmp",
                          pane_id="%9", window_name="w")]


# ---------- group_by_sessions ----------

def test_group_by_sessions():
    panes = [
        Pane(session="s1", window_index=0, pane_index=0, cwd="/a"),
        Pane(session="s1", window_index=0, pane_index=1, cwd="/b"),
        Pane(session="s1", window_index=1, pane_index=0, cwd="/c"),
        Pane(session="s2", window_index=0, pane_index=0, cwd="/d"),
    ]
    grouped = group_by_sessions(panes)
    assert len(grouped) == 2
    assert len(grouped["s1"][0]) == 2
    assert len(grouped["s1"][1]) == 1
    assert len(grouped["s2"][0]) == 1
    assert [p.cwd for p in grouped["s1"][0]] == ["/a", "/b"]


# ---------- session_activity_map ----------

def test_session_activity_map_max_per_session():
    panes = [
        Pane(session="s1", session_activity=1000),
        Pane(session="s1", session_activity=3000),
        Pane(session="s2", session_activity=2000),
    ]
    activity = session_activity_map(panes)
    assert activity["s1"].timestamp() == 3000
    assert activity["s2"].timestamp() == 2000


def test_session_activity_map_empty():
    assert session_activity_map([]) == {}


def test_session_activity_map_zero_timestamp_skipped():
    activity = session_activity_map([Pane(session="s1", session_activity=0)])
    assert "s1" not in activity


# ---------- parse_current_target ----------

def test_parse_current_target():
    assert parse_current_target("myproject\t3\n") == ("myproject", 3)


def test_parse_current_target_empty():
    with pytest.raises(TmuxError):
        parse_current_target("")


def test_parse_current_target_no_tab():
    with pytest.raises(TmuxError):
        parse_current_target("myproject")


def test_parse_current_target_bad_index():
    with pytest.raises(TmuxError, match="invalid window index"):
        parse_current_target("myproject\tabc")


# ---------- primary_pane_cwd ----------

@pytest.mark.parametrize(
    "panes, want",
    [
        ([], ""),
        (None, ""),
        ([Pane(pane_index=0, cwd="/a"), Pane(pane_index=1, cwd="/b")], "/a"),
        ([Pane(pane_index=1, cwd="/b")], "/b"),
        ([Pane(pane_index=2, cwd="/c"), Pane(pane_index=0, cwd="/z")], "/z"),
    ],
)
def test_primary_pane_cwd(panes, want):
    assert primary_pane_cwd(panes) == want


# ---------- new_session ----------

def test_new_session_path_required():
    with pytest.raises(TmuxError, match="path is required"):
        new_session("test-session", "")


def test_new_session_name_required():
    with pytest.raises(TmuxError, match="name is required"):
        new_session("", "/tmp")


def test_new_session_path_not_exist(tmp_path):
    with pytest.raises(TmuxError):
        new_session("test-session", str(tmp_path / "demux-no-such-dir-xyz"))


def test_new_session_runs_tmux_commands(tmp_path):
    with mock.patch("demux.tmux.subprocess.run", return_value=_completed()) as run:
        result = new_session("proj", str(tmp_path))
    assert result is None
    assert _commands(run) == [
        ["tmux", "new-session", "-d", "-s", "proj", "-c", str(tmp_path)],
        ["tmux", "switch-client", "-t", "proj"],
    ]


def test_new_session_reports_tmux_failure(tmp_path):
    failure = subprocess.CalledProcessError(1, ["tmux"])
    with mock.patch("demux.tmux.subprocess.run", side_effect=failure):
        with pytest.raises(TmuxError, match="tmux new-session"):
            new_session("proj", str(tmp_path))


# ---------- create_session_windows ----------

def test_create_session_windows_empty_is_noop():
    with mock.patch("demux.tmux.subprocess.run", return_value=_completed()) as run:
        first = create_session_windows("s", "/p", [])
        second = create_session_windows("s", "/p", None)
    assert first is None
    assert second is None
    assert _commands(run) == []


def test_create_session_windows_command_sequence():
    specs = [WindowSpec("editor", "nvim ."), WindowSpec("shell")]
    with mock.patch("demux.tmux.subprocess.run", return_value=_completed()) as run:
        result = create_session_windows("proj", "/work", specs)
    assert result is None
    assert _commands(run) == [
        ["tmux", "rename-window", "-t", "proj:0", "editor"],
        ["tmux", "send-keys", "-t", "proj:0", "nvim .", "Enter"],
        ["tmux", "new-window", "-t", "proj", "-n", "shell", "-c", "/work"],
        ["tmux", "rename-window", "-t", "proj:1", "shell"],
    ]


def test_create_session_windows_failure_names_window():
    failure = subprocess.CalledProcessError(1, ["tmux"])
    with mock.patch("demux.tmux.subprocess.run", side_effect=failure):
        with pytest.raises(TmuxError, match="rename-window 'editor'"):
            create_session_windows("proj", "/work", [WindowSpec("editor")])


# ---------- list_panes / current_target / switch_client ----------

def test_list_panes_parses_output():
    out = "s\t0\t0\t/a\t%1\tw\t42\t100\n"
    with mock.patch("demux.tmux.subprocess.run", return_value=_completed(out)) as run:
        panes = list_panes()
    assert panes == [Pane("s", 0, 0, "/a", "%1", "w", 42, 100)]
    assert _commands(run)[0][:4] == ["tmux", "list-panes", "-a", "-F"]


def test_list_panes_missing_tmux():
    with mock.patch("demux.tmux.subprocess.run", side_effect=FileNotFoundError("tmux")):
        with pytest.raises(TmuxError, match="tmux list-panes"):
            list_panes()


def test_current_target():
    with mock.patch("demux.tmux.subprocess.run", return_value=_completed("work\t2\n")):
        assert current_target() == ("work", 2)


def test_switch_client_runs_command():
    with mock.patch("demux.tmux.subprocess.run", return_value=_completed()) as run:
        result = switch_client("work:1.0")
    assert result is None
    assert _commands(run) == [["tmux", "switch-client", "-t", "work:1.0"]]


def test_switch_client_failure():
    failure = subprocess.CalledProcessError(1, ["tmux"])
    with mock.patch("demux.tmux.subprocess.run", side_effect=failure):
        with pytest.raises(TmuxError, match="switch-client"):
            switch_client("nowhere")