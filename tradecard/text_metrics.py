"""Font specs and text width measurement."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import ImageFont


@dataclass(frozen=True)
class FontSpec:
    """Logical font: family name as registered in the assets dir, pixel size."""

    family: str
    size: int
    bold: bool = False

    @property
    def line_height(self) -> float:
        """Approximate rendered height of a text line (cap height + ascenders)."""
        return self.size * 0.75


def measure(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> float:
    """Advance width of ``text`` in pixels.

    Used to place elements directly after previously drawn text. Errors are
    not caught; without a width there is no layout to fall back to.
    """
    return font.getlength(text)
