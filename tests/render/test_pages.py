"""Tests for page rendering."""

from __future__ import annotations

import pytest

from patternkit.exceptions import UnresolvedLayoutError
from patternkit.model import Page
from patternkit.render.pages import render_pages


def page(page_id: str, contents: str, **data) -> Page:
    return Page(id=page_id, name=page_id.rsplit(".", 1)[-1].title(), data=data, contents=contents, path=f"{page_id}.html")


def template(contents: str) -> dict:
    return {"contents": contents, "path": "t.html"}


TEMPLATES = {
    "layouts": {
        "page": template("[{{ name }}] {{ content }}"),
        "bare": template("{{ content }}"),
    }
}


def test_pages_render_body_then_layout() -> None:
    pages = {"index": page("pages.index", "Hello {{ site.who }}")}

    rendered = render_pages(pages, TEMPLATES, layout_key="layouts.page", site={"who": "world"})

    assert rendered["index"].contents == "[Index] Hello world"
    assert pages["index"].contents == "Hello {{ site.who }}"


def test_page_layout_from_front_matter() -> None:
    pages = {"docs": {"intro": page("pages.docs.intro", "<p>intro</p>", layout="layouts.bare")}}

    rendered = render_pages(pages, TEMPLATES, layout_key="layouts.page")

    assert rendered["docs"]["intro"].contents == "<p>intro</p>"


def test_missing_page_layout() -> None:
    pages = {"index": page("pages.index", "x", layout="layouts.missing")}

    with pytest.raises(UnresolvedLayoutError):
        render_pages(pages, TEMPLATES, layout_key="layouts.page")
