"""Shared fixtures: a small pattern library laid out on disk."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from patternkit.config import PatternkitConfig, load_config

SITE_FILES: dict[str, str] = {
    "src/patterns/pink.html": """\
        ---
        notes: A *pink* swatch
        ---
        <div class="pink"></div>
        """,
    "src/patterns/components/orange.html": """\
        <div class="orange"></div>
        """,
    "src/patterns/components/button/base.html": """\
        ---
        notes: The base button
        links:
          - https://example.com/buttons
        ---
        <button>Base</button>
        """,
    "src/patterns/components/button/aardvark.html": """\
        ---
        name: Something Else
        ---
        <button>Aardvark</button>
        """,
    "src/patterns/components/button/disabled.html": """\
        <button disabled>Disabled</button>
        """,
    "src/patterns/components/button/color-variation.html": """\
        <button class="red">Red</button>
        """,
    "src/patterns/components/button/hello.html": """\
        ---
        hidden: true
        ---
        <button>Hello</button>
        """,
    "src/patterns/components/button/collection.yaml": """\
        name: Buttons
        order:
          - disabled
          - color-variation
        description: Clickable things
        """,
    "src/patterns/fingers/ideal.md": """\
        ---
        ancillary: |
          - one
          - two
        ---
        An *ideal* finger.
        """,
    "src/patterns/typography/headings/h1.html": """\
        <h1>Heading</h1>
        """,
    "src/templates/layouts/collection.html": """\
        <h1>{{ name }}</h1>
        {% for pattern in patterns %}
        <section id="{{ pattern.id }}">{{ pattern.contents }}</section>
        {% endfor %}
        {% include "partials.footer" %}
        """,
    "src/templates/layouts/page.html": """\
        <title>{{ name }}</title>
        <main>{{ content }}</main>
        """,
    "src/templates/partials/footer.html": """\
        <footer>{{ site.data.site.title }}</footer>
        """,
    "src/data/site.yaml": """\
        title: Test Library
        """,
    "src/pages/index.md": """\
        ---
        name: Home
        ---
        Welcome to {{ site.data.site.title }}.
        """,
    "src/pages/docs/getting-started.html": """\
        <p>{{ site.patterns.collection.name }}</p>
        """,
    ".patternkit.toml": """\
        [field_parsers]
        ancillary = "markdown"
        """,
}


def write_files(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(dedent(content), encoding="utf-8")


@pytest.fixture
def site_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A complete site: patterns, templates, data, pages and config."""
    for name in ("PATTERNKIT_LOG_LEVEL", "PATTERNKIT_LAYOUTS__COLLECTION"):
        monkeypatch.delenv(name, raising=False)
    write_files(tmp_path, SITE_FILES)
    return tmp_path


@pytest.fixture
def config(site_root: Path) -> PatternkitConfig:
    return load_config(site_root)
