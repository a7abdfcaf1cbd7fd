"""Shared visual constants and helpers for gitsnap."""

from __future__ import annotations

from rich.style import Style
from rich.text import Text

# ── Color Palette (GitHub Dark + Neon Accents) ──────────────────────────

SURFACE = "#161b22"
MUTED = "#8b949e"

CYAN = "#58a6ff"
GREEN = "#39d353"
PURPLE = "#bc8cff"
YELLOW = "#e3b341"
RED = "#f85149"

ACCENT_REPOS = CYAN

# ── ASCII Banner ────────────────────────────────────────────────────────

BANNER = r"""
        _ _
   __ _(_) |_ ___ _ __   __ _ _ __
  / _` | | __/ __| '_ \ / _` | '_ \
 | (_| | | |_\__ \ | | | (_| | |_) |
  \__, |_|\__|___/_| |_|\__,_| .__/
  |___/                      |_|"""

TAGLINE = "your repositories, minus the bytes"

ICON_REPOS = "📦"
ICON_OK = "✔"
ICON_FAIL = "✘"


def layout_label(is_bare: bool) -> Text:
    """Render a repository's storage layout as a coloured label."""
    if is_bare:
        return Text("bare", style=Style(color=PURPLE, bold=True))
    return Text("worktree", style=Style(color=GREEN))


def remote_lines(remotes: list[str]) -> Text:
    """Render remotes one per line, primary highlighted, none shown in red."""
    text = Text()
    if not remotes:
        text.append("(no remote)", style=Style(color=RED, italic=True))
        return text
    for i, url in enumerate(remotes):
        if i:
            text.append("\n")
            text.append(url, style=Style(color=MUTED))
        else:
            text.append(url, style=Style(color=CYAN, bold=True))
    return text


def render_banner() -> Text:
    """Render the gitsnap ASCII banner as styled Rich Text."""
    text = Text(justify="center")
    for line in BANNER.strip("\n").split("\n"):
        text.append(line + "\n", style=Style(color=GREEN, bold=True))
    text.append(f"  {TAGLINE}\n", style=Style(color=MUTED, italic=True))
    return text
