"""The key-binding help overlay."""

from __future__ import annotations

from dataclasses import dataclass

from demux.keys import all_key_defs

HELP_CONTENT_WIDTH = 44
# Rows taken by the overlay border (top and bottom) and padding (top and bottom).
HELP_OVERHEAD = 4
# Above this key-column width the gap between key and description is dropped.
HELP_WIDE_KEY_THRESHOLD = 20

_PAD_X = 2


def help_section(name: str) -> str:
    """Return a section heading line, filled with rules to the content width."""
    fill = max(HELP_CONTENT_WIDTH - 4 - len(name) - 1, 0)
    return "─── " + name + " " + "─" * fill


def help_kv(key_width: int, gap: int, key: str, description: str) -> str:
    """Return a binding line: key padded to ``key_width``, ``gap`` spaces, description."""
    return "  " + key.ljust(key_width) + " " * gap + description


def _box(lines: list[str]) -> str:
    width = max((len(line) for line in lines), default=0)
    inner = width + 2 * _PAD_X
    pad = " " * _PAD_X
    blank = "│" + " " * inner + "│"
    rows = ["╭" + "─" * inner + "╮", blank]
    rows.extend(f"│{pad}{line.ljust(width)}{pad}│" for line in lines)
    rows.extend([blank, "╰" + "─" * inner + "╯"])
    return "\n".join(rows)


@dataclass
class HelpModel:
    """Scrollable help overlay listing every documented key binding."""

    scroll_offset: int = 0

    def scroll_up(self) -> None:
        """Scroll one line up, stopping at the top."""
        if self.scroll_offset > 0:
            self.scroll_offset -= 1

    def scroll_down(self, avail_h: int) -> None:
        """Scroll one line down, stopping once the last line is visible in ``avail_h`` rows."""
        visible = max(avail_h - HELP_OVERHEAD, 1)
        max_offset = max(len(self.lines()) - visible, 0)
        if self.scroll_offset < max_offset:
            self.scroll_offset += 1

    def lines(self) -> list[str]:
        """Return the overlay content lines, grouped by section."""
        sections: dict[str, list[tuple[str, str]]] = {}
        for keydef in all_key_defs():
            if not keydef.help_key:
                continue
            sections.setdefault(keydef.section, []).append((keydef.help_key, keydef.help_desc))

        lines: list[str] = []
        for index, (section, entries) in enumerate(sections.items()):
            if index > 0:
                lines.append("")
            lines.append(help_section(section))
            width = max(len(key) for key, _ in entries)
            gap = 0 if width > HELP_WIDE_KEY_THRESHOLD else 2
            lines.extend(help_kv(width, gap, key, desc) for key, desc in entries)
        return lines

    def render(self, max_h: int = 0) -> str:
        """Return the boxed overlay, clipped to ``max_h`` rows; 0 means no clipping."""
        lines = self.lines()
        if max_h > 0:
            visible = max(max_h - HELP_OVERHEAD, 1)
            if len(lines) > visible:
                start = min(self.scroll_offset, len(lines) - visible)
                lines = lines[start:start + visible]
        return _box(lines)