"""Reading and editing sessions.toml / private.toml."""

from __future__ import annotations

import sys
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from demux.session import ConfigEntry, WindowTemplate

SESSION_FILES = ("sessions.toml", "private.toml")
_HEADER = "[[session]]"


class SessionConfigError(Exception):
    """Raised when a sessions file cannot be read, parsed or edited."""


@dataclass
class SessionsConfig:
    """Parsed sessions configuration."""

    entries: list[ConfigEntry] = field(default_factory=list)
    window_templates: dict[str, WindowTemplate] = field(default_factory=dict)


def _warn(message: str) -> None:
    print(f"demux: {message}", file=sys.stderr)


def _string(table: Mapping[str, Any], key: str) -> str:
    value = table.get(key, "")
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {type(value).__name__}")
    return value


def _boolean(table: Mapping[str, Any], key: str) -> bool:
    value = table.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean, got {type(value).__name__}")
    return value


def _strings(table: Mapping[str, Any], key: str) -> list[str]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{key}: expected an array of strings")
    return list(value)


def _tables(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValueError(f"{key}: expected an array of tables")
    return value


def _entry_from_table(table: Mapping[str, Any]) -> ConfigEntry:
    return ConfigEntry(
        name=_string(table, "name"),
        path=_string(table, "path"),
        worktree=_boolean(table, "worktree"),
        group=_string(table, "group"),
        labels=_strings(table, "labels"),
        icon=_string(table, "icon"),
        windows=_strings(table, "windows"),
    )


def _template_from_table(table: Mapping[str, Any]) -> WindowTemplate:
    return WindowTemplate(
        id=_string(table, "id"),
        name=_string(table, "name"),
        after_create_cmd=_string(table, "after_create_cmd"),
        from_id=_string(table, "from"),
    )


def _read_sessions_file(
    path: Path,
) -> tuple[list[ConfigEntry], list[WindowTemplate]] | None:
    """Parse a sessions file; return None when it does not exist."""
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError:
        return None
    entries = [_entry_from_table(t) for t in _tables(data, "session")]
    templates = [_template_from_table(t) for t in _tables(data, "window_templates")]
    return entries, templates


def load_config_sessions(config_dir: str | Path) -> SessionsConfig:
    """Load sessions.toml then private.toml; later duplicates replace earlier ones."""
    config = SessionsConfig()
    seen: dict[str, int] = {}
    raw_templates: list[WindowTemplate] = []

    for file_name in SESSION_FILES:
        try:
            parsed = _read_sessions_file(Path(config_dir) / file_name)
        except (OSError, ValueError) as exc:
            raise SessionConfigError(f"load {file_name}: {exc}") from exc
        if parsed is None:
            continue
        entries, templates = parsed
        for entry in entries:
            if not entry.name or not entry.path:
                _warn(f"skipping session with missing name/path in {file_name}")
                continue
            name = entry.display_name()
            if name in seen:
                _warn(f"duplicate session {name!r} in {file_name} (overrides previous)")
                config.entries[seen[name]] = entry
            else:
                seen[name] = len(config.entries)
                config.entries.append(entry)
        raw_templates.extend(templates)

    config.window_templates = resolve_window_templates(raw_templates)
    return config


def resolve_window_templates(raw: Iterable[WindowTemplate]) -> dict[str, WindowTemplate]:
    """Key templates by id, applying single-level inheritance through ``from``."""
    templates = list(raw)
    by_id = {t.id: t for t in templates}
    resolved: dict[str, WindowTemplate] = {}
    for template in templates:
        if not template.from_id:
            resolved[template.id] = template
            continue
        base = by_id.get(template.from_id)
        if base is None:
            _warn(
                f"window_template {template.id!r} references unknown "
                f"template id {template.from_id!r}"
            )
            resolved[template.id] = template
            continue
        resolved[template.id] = replace(
            base,
            id=template.id,
            name=template.name,
            from_id="",
            after_create_cmd=template.after_create_cmd or base.after_create_cmd,
        )
    return resolved


def _toml_quote(text: str) -> str:
    """Quote ``text`` as a TOML basic string, escaping only backslash and double quote."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_block(entry: ConfigEntry) -> str:
    """Render ``entry`` as a ``[[session]]`` block, omitting empty optional fields."""
    lines = ["", _HEADER, f"name  = {_toml_quote(entry.name)}"]
    if entry.group:
        lines.append(f"group = {_toml_quote(entry.group)}")
    lines.append(f"path  = {_toml_quote(entry.path)}")
    if entry.worktree:
        lines.append("worktree = true")
    if entry.labels:
        lines.append(f"labels   = [{', '.join(map(_toml_quote, entry.labels))}]")
    if entry.icon:
        lines.append(f"icon     = {_toml_quote(entry.icon)}")
    if entry.windows:
        lines.append(f"windows  = [{', '.join(map(_toml_quote, entry.windows))}]")
    return "\n".join(lines) + "\n"


def append_entry(path: str | Path, entry: ConfigEntry) -> None:
    """Append ``entry`` to the sessions file, refusing a duplicate name."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SessionConfigError(f"create config dir: {exc}") from exc

    try:
        parsed = _read_sessions_file(path)
    except (OSError, ValueError) as exc:
        raise SessionConfigError(f"read {path.name}: {exc}") from exc
    existing = parsed[0] if parsed else []
    if any(e.display_name() == entry.display_name() for e in existing):
        raise SessionConfigError(
            f"session {entry.display_name()!r} already exists in {path.name}"
        )

    try:
        with path.open("a", encoding="utf-8") as fh:
            fh.write(format_block(entry))
    except OSError as exc:
        raise SessionConfigError(f"write {path.name}: {exc}") from exc


def _split_blocks(content: str) -> tuple[list[str], str]:
    """Split content into ``[[session]]`` blocks and the preamble before the first one."""
    blocks: list[str] = []
    preamble_lines: list[str] = []
    current: list[str] = []
    in_block = False
    for line in content.split("\n"):
        if line.strip() == _HEADER:
            if in_block:
                blocks.append("\n".join(current) + "\n")
                current = []
            in_block = True
            current.append(line)
        elif in_block:
            current.append(line)
        else:
            preamble_lines.append(line)
    if in_block and current:
        blocks.append("\n".join(current) + "\n")
    preamble = "\n".join(preamble_lines)
    if preamble and not preamble.endswith("\n"):
        preamble += "\n"
    return blocks, preamble


def _block_has_field(block: str, key: str, value: str) -> bool:
    """Report whether ``block`` holds ``key = "value"``, allowing spaces around ``=``."""
    needle = _toml_quote(value)
    for line in block.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith(key):
            continue
        rest = trimmed[len(key):]
        if not rest or rest[0] not in "= \t":
            continue
        rest = rest.strip()
        if rest.startswith("=") and rest[1:].strip() == needle:
            return True
    return False


def remove_entry(path: str | Path, name: str) -> None:
    """Remove the ``[[session]]`` block named ``name`` from the file at ``path``."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SessionConfigError(f"read {path.name}: {exc}") from exc

    blocks, preamble = _split_blocks(content)
    target = next((i for i, b in enumerate(blocks) if _block_has_field(b, "name", name)), None)
    if target is None:
        raise SessionConfigError(f"session {name!r} not found in {path.name}")
    del blocks[target]

    result = (preamble + "".join(blocks)).rstrip("\n")
    if result:
        result += "\n"
    try:
        path.write_text(result, encoding="utf-8")
    except OSError as exc:
        raise SessionConfigError(f"write {path.name}: {exc}") from exc