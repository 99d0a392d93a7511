"""Asset lookup for card rendering.

Bitmaps (background, chain logos, separator) and fonts are resolved by
logical name from an assets directory. Nothing here raises on a missing or
broken file: bitmaps come back as ``found=False`` and fonts fall back to
system fonts, then to Pillow's built-in font.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageFont

from .models import Chain
from .text_metrics import FontSpec

logger = logging.getLogger(__name__)

DEFAULT_ASSETS_DIR = Path(__file__).parent.parent / "assets"

# Logical bitmap name -> file stem. Logos are keyed by chain instead.
_BITMAP_FILES = {
    "background": "bg",
    "separator": "stroke",
}

# ---------------------------------------------------------------------------
# System font fallbacks
# ---------------------------------------------------------------------------
# Linux font dirs
_UBUNTU_DIR = "/usr/share/fonts/truetype/ubuntu/"
_DEJAVU_DIR = "/usr/share/fonts/truetype/dejavu/"
# macOS font dirs
_MAC_SUPP_DIR = "/System/Library/Fonts/Supplemental/"
_MAC_SYS_DIR = "/System/Library/Fonts/"

_BOLD_PATHS = [
    _UBUNTU_DIR + "Ubuntu-B.ttf", _DEJAVU_DIR + "DejaVuSans-Bold.ttf",
    _MAC_SUPP_DIR + "Impact.ttf", _MAC_SUPP_DIR + "Arial Bold.ttf",
]
_MONO_PATHS = [
    _UBUNTU_DIR + "UbuntuMono-R.ttf", _DEJAVU_DIR + "DejaVuSansMono.ttf",
    _MAC_SUPP_DIR + "Courier New.ttf",
]
_MONO_BOLD_PATHS = [
    _UBUNTU_DIR + "UbuntuMono-B.ttf", _DEJAVU_DIR + "DejaVuSansMono-Bold.ttf",
    _MAC_SUPP_DIR + "Courier New Bold.ttf",
]

_MONO_FAMILIES = {"GeistMono"}


@dataclass(frozen=True)
class AssetHandle:
    name: str
    found: bool
    bitmap: Image.Image | None = None


def _try_font(path: str | Path, size: int) -> ImageFont.FreeTypeFont | None:
    try:
        return ImageFont.truetype(str(path), size)
    except (OSError, IOError):
        return None


class AssetResolver:
    """Resolves bitmaps and fonts from one assets directory.

    Bitmaps are loaded fresh on every ``resolve`` call. Fonts are cached per
    resolver since they are never mutated after loading.
    """

    def __init__(self, assets_dir: str | Path = DEFAULT_ASSETS_DIR) -> None:
        self.assets_dir = Path(assets_dir)
        self.fonts_dir = self.assets_dir / "fonts"
        self._font_cache: dict[FontSpec, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def path_for(self, name: str, chain: Chain | None = None) -> Path:
        if name == "logo":
            if chain is None:
                raise ValueError("logo asset requires a chain")
            stem = chain.logo_asset
        else:
            stem = _BITMAP_FILES[name]
        return self.assets_dir / f"{stem}.png"

    def resolve(self, name: str, chain: Chain | None = None) -> AssetHandle:
        """Load a bitmap by logical name: background, logo (per chain), separator."""
        label = f"{name}[{chain.value}]" if chain is not None else name
        path = self.path_for(name, chain)

        if not path.is_file():
            logger.warning("Asset %s not found at %s", label, path)
            return AssetHandle(name=label, found=False)

        try:
            with Image.open(path) as im:
                bitmap = im.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.warning("Failed to load asset %s from %s: %s", label, path, e)
            return AssetHandle(name=label, found=False)

        return AssetHandle(name=label, found=True, bitmap=bitmap)

    def font(self, spec: FontSpec) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        """Load a font for ``spec``, falling back until something loads."""
        cached = self._font_cache.get(spec)
        if cached is not None:
            return cached

        font = self._load_font(spec)
        self._font_cache[spec] = font
        return font

    def _load_font(self, spec: FontSpec) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        candidates: list[str | Path] = []
        if spec.bold:
            candidates.append(self.fonts_dir / f"{spec.family}-Bold.ttf")
        candidates.append(self.fonts_dir / f"{spec.family}.ttf")

        if spec.family in _MONO_FAMILIES:
            candidates.extend(_MONO_BOLD_PATHS if spec.bold else _MONO_PATHS)
        candidates.extend(_BOLD_PATHS)

        for path in candidates:
            f = _try_font(path, spec.size)
            if f is not None:
                return f

        logger.info("No font file for %s %dpx; using built-in default", spec.family, spec.size)
        return ImageFont.load_default(spec.size)
