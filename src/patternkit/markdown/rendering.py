"""Markdown to HTML rendering."""

from markdown_it import MarkdownIt

_md = MarkdownIt("commonmark", {"html": True}).enable("table")


def render_markdown(content: str | None) -> str:
    """Render markdown content to HTML.

    Returns an empty string if content is None or empty.
    """
    if content:
        return _md.render(content).strip()
    return ""
