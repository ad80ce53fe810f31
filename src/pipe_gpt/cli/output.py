"""Render a chat outcome as plain text, terminal markdown, or an error."""

from __future__ import annotations

import logging

import click
import mistune

from pipe_gpt.core.models import ChatOutcome

log = logging.getLogger(__name__)

CODE_MARGIN = " " * 4
# 256-colour grays: light text on a near-black background
CODE_FG = 249
CODE_BG = 235
TEXT_FG = "yellow"

_parse = mistune.create_markdown(renderer="ast")


def render_outcome(outcome: ChatOutcome, as_markdown: bool) -> None:
    """Print a reply to stdout, or an error to stderr."""
    if not outcome.ok:
        click.echo(f"Error: {outcome.error}", err=True)
        return

    if not as_markdown:
        click.echo(outcome.reply)
        return

    try:
        rendered = render_markdown(outcome.reply)
    except Exception:
        log.warning("Markdown rendering failed, printing plain text", exc_info=True)
        click.echo(outcome.reply)
        return
    click.echo(rendered)


def render_markdown(text: str) -> str:
    """Convert markdown to ANSI-styled terminal text.

    Code blocks are indented and drawn on their own colour pair so they stand
    apart from prose. Styling is stripped by click.echo when stdout is not a
    terminal.
    """
    blocks = [_render_block(token) for token in _parse(text)]
    return "\n\n".join(b for b in blocks if b).rstrip("\n")


# --- Block level ---


def _render_block(token: dict, depth: int = 0) -> str:
    kind = token.get("type")

    if kind == "blank_line":
        return ""
    if kind == "paragraph" or kind == "block_text":
        return _render_inline(token.get("children", []))
    if kind == "heading":
        level = token.get("attrs", {}).get("level", 1)
        title = _render_inline(token.get("children", []), bold=True)
        return click.style(f"{'#' * level} ", fg=TEXT_FG, bold=True) + title
    if kind == "block_code":
        return _render_code_block(token.get("raw", ""))
    if kind == "list":
        return _render_list(token, depth)
    if kind == "block_quote":
        inner = "\n".join(_render_block(t, depth) for t in token.get("children", []))
        return "\n".join(f"│ {line}" for line in inner.splitlines())
    if kind == "thematic_break":
        return click.style("─" * 40, fg=TEXT_FG)
    if kind == "block_html":
        return token.get("raw", "").rstrip("\n")

    # Anything else: fall back to whatever text it carries
    if "children" in token:
        return _render_inline(token["children"])
    return token.get("raw", "")


def _render_code_block(code: str) -> str:
    lines = code.rstrip("\n").split("\n")
    width = max(len(line) for line in lines) + 2
    return "\n".join(
        CODE_MARGIN + click.style(f" {line}".ljust(width), fg=CODE_FG, bg=CODE_BG)
        for line in lines
    )


def _render_list(token: dict, depth: int) -> str:
    ordered = token.get("attrs", {}).get("ordered", False)
    start = token.get("attrs", {}).get("start", 1) or 1
    indent = "  " * depth
    lines = []

    for i, item in enumerate(token.get("children", [])):
        marker = f"{start + i}." if ordered else "•"
        parts = []
        for child in item.get("children", []):
            if child.get("type") == "list":
                parts.append(_render_list(child, depth + 1))
            else:
                parts.append(f"{indent}{marker} {_render_block(child, depth)}")
                marker = " " * len(marker)
        lines.append("\n".join(parts))

    return "\n".join(lines)


# --- Inline level ---


def _render_inline(tokens: list[dict], **style) -> str:
    """Style every text run on its own, so a span's reset never leaks into its neighbours."""
    style.setdefault("fg", TEXT_FG)
    out = []
    for token in tokens:
        kind = token.get("type")
        children = token.get("children", [])
        if kind == "text":
            out.append(click.style(token.get("raw", ""), **style))
        elif kind == "codespan":
            out.append(click.style(token.get("raw", ""), fg=CODE_FG, bg=CODE_BG))
        elif kind == "strong":
            out.append(_render_inline(children, **{**style, "bold": True}))
        elif kind == "emphasis":
            out.append(_render_inline(children, **{**style, "italic": True}))
        elif kind == "link":
            label = _render_inline(children, **style)
            url = token.get("attrs", {}).get("url", "")
            if click.unstyle(label) != url:
                label += click.style(f" ({url})", **style)
            out.append(label)
        elif kind == "softbreak":
            out.append(" ")
        elif kind == "linebreak":
            out.append("\n")
        elif "children" in token:
            out.append(_render_inline(children, **style))
        else:
            out.append(click.style(token.get("raw", ""), **style))
    return "".join(out)
