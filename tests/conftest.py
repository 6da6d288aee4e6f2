"""Shared test fixtures for fizzterm."""

import pytest

from fizzterm.palette import Palette, PaletteCell
from fizzterm.themes import Theme


@pytest.fixture
def dark_cell() -> PaletteCell:
    """Palette cell holding the fallback palette: white on black."""
    return PaletteCell(Palette(foreground="#ffffff", background="#000000"))


@pytest.fixture
def light_cell() -> PaletteCell:
    """Palette cell for a light terminal: black on white."""
    return PaletteCell(Palette(foreground="#000000", background="#ffffff"))


@pytest.fixture
def dark_theme(dark_cell: PaletteCell) -> Theme:
    """Theme reading the dark palette cell."""
    return Theme(dark_cell)


@pytest.fixture
def light_theme(light_cell: PaletteCell) -> Theme:
    """Theme reading the light palette cell."""
    return Theme(light_cell)


@pytest.fixture
def sample_card_html() -> str:
    """Card description as served by the content service."""
    return """<div>
  <h1>Release checklist</h1>
  <p>Ship the <strong>new board</strong> &amp; <em>tidy up</em> the old one.</p>
  <ol>
    <li>Freeze <code>main</code></li>
    <li>Tag the release</li>
  </ol>
  <ul>
    <li>Notify <a href="https://example.com/team">the team</a></li>
  </ul>
  <action-text-attachment url="/rails/active_storage/blobs/42/shot.png" content-type="image/png" filename="shot.png" width="800" height="600"><figure><img src="/rails/active_storage/blobs/42/shot.png" alt="shot"></figure></action-text-attachment>
  <action-text-attachment url="/rails/active_storage/blobs/43/demo.mp4" content-type="video/mp4" filename="demo.mp4" caption="Demo run"></action-text-attachment>
  <action-text-attachment url="https://files.example.com/spec.pdf" content-type="application/pdf" filename="spec.pdf"></action-text-attachment>
  <img src="https://cdn.example.com/logo.png" alt="Logo" width="64" height="64">
</div>"""
