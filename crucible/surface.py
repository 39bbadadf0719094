"""
Pillow drawing surface used by the card renderer.

PillowSurface is both the measurement adapter the text engine consumes
(measure_text) and the sink for its positioned draw instructions.
SymbolCache holds symbol images keyed by symbol reference; it is built once
and handed to the renderer explicitly.
"""

import io
import logging
import os
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .config import (
    DIVIDER_COLOR,
    DIVIDER_LINE_WIDTH,
    SYMBOL_SPACING_RATIO,
    SYMBOL_WIDTH_RATIO,
)
from .text_processing.text_fitting import Divider, FittedBlock, PlacedLine
from .text_processing.tokenizer import tokenize

logger = logging.getLogger(__name__)


def symbol_key(symbol: str) -> str:
    """Normalize a symbol reference: "G/P" -> "gp", "T" -> "t" """
    return symbol.lower().replace('/', '')


class SymbolCache:
    """
    Symbol reference -> image lookup.

    Unknown symbols resolve to None; callers treat that as "draw nothing".
    """

    def __init__(self, images: Optional[Dict[str, Image.Image]] = None):
        self._images: Dict[str, Image.Image] = {}
        for symbol, image in (images or {}).items():
            self.add(symbol, image)

    @classmethod
    def from_directory(cls, directory: str) -> 'SymbolCache':
        """
        Load every <symbol>.png in a directory.

        Args:
            directory: Folder containing files like t.png, gp.png, 2.png

        Returns:
            Populated SymbolCache (empty if the directory does not exist)
        """
        cache = cls()
        if not directory or not os.path.isdir(directory):
            logger.warning("Symbol directory '%s' not found, symbols will be blank", directory)
            return cache

        for file_name in sorted(os.listdir(directory)):
            stem, ext = os.path.splitext(file_name)
            if ext.lower() != '.png':
                continue
            with Image.open(os.path.join(directory, file_name)) as image:
                cache.add(stem, image.convert('RGBA'))
        logger.info('Loaded %d symbol images from %s', len(cache), directory)
        return cache

    def add(self, symbol: str, image: Image.Image):
        self._images[symbol_key(symbol)] = image

    def get(self, symbol: str) -> Optional[Image.Image]:
        return self._images.get(symbol_key(symbol))

    def __contains__(self, symbol: str) -> bool:
        return symbol_key(symbol) in self._images

    def __len__(self) -> int:
        return len(self._images)


class PillowSurface:
    """RGBA canvas with font-aware text measurement and draw primitives"""

    def __init__(self, width: int, height: int, fonts: Optional[Dict[str, str]] = None,
                 background='#1a1a1a'):
        """
        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
            fonts: Family name -> font file path
            background: Fill color for the empty canvas
        """
        self.image = Image.new('RGBA', (width, height), background)
        self.draw = ImageDraw.Draw(self.image, 'RGBA')
        self.fonts = fonts or {}
        self._font_cache: Dict[Tuple[str, float], ImageFont.FreeTypeFont] = {}

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def get_font(self, family: str, size: float):
        """Font object for a family at a size, falling back to Pillow's default font"""
        key = (family, size)
        if key not in self._font_cache:
            path = self.fonts.get(family)
            font = None
            if path:
                try:
                    font = ImageFont.truetype(path, size)
                except OSError as e:
                    logger.warning("Could not load font '%s' from %s: %s", family, path, e)
            if font is None:
                font = ImageFont.load_default(size)
            self._font_cache[key] = font
        return self._font_cache[key]

    def measure_text(self, text: str, font: str, size: float) -> float:
        if not text:
            return 0.0
        return self.get_font(font, size).getlength(text)

    def draw_text(self, text: str, x: float, baseline: float, font: str, size: float, fill='black'):
        """Draw text with its left edge at x and alphabetic baseline at baseline"""
        self.draw.text((x, baseline), text, fill=fill, font=self.get_font(font, size), anchor='ls')

    def draw_line(self, placed: PlacedLine, fill='black'):
        self.draw_text(placed.text, placed.x, placed.baseline, placed.font, placed.size, fill)

    def draw_rich_line(self, placed: PlacedLine, symbols: SymbolCache, fill='black'):
        """
        Draw a line that may contain {X} symbols.

        Symbols without an image still advance the pen by their footprint so
        drawn width matches measured width.
        """
        symbol_size = placed.size * SYMBOL_WIDTH_RATIO
        spacing = placed.size * SYMBOL_SPACING_RATIO / 2
        x = placed.x
        for token in tokenize(placed.text):
            if token.is_symbol:
                image = symbols.get(token.value)
                if image is not None:
                    self.draw_image(image, x + spacing, placed.baseline - symbol_size * 0.85,
                                    symbol_size, symbol_size)
                else:
                    logger.debug("No image for symbol '%s'", token.value)
                x += symbol_size + spacing * 2
            else:
                self.draw_text(token.value, x, placed.baseline, placed.font, placed.size, fill)
                x += self.measure_text(token.value, placed.font, placed.size)

    def draw_block(self, block: FittedBlock, symbols: SymbolCache, fill='black'):
        """Draw every line of a fitted block, plus its divider if it has one"""
        for placed in block.lines:
            self.draw_rich_line(placed, symbols, fill)
        if block.divider is not None:
            self.draw_divider(block.divider)

    def draw_divider(self, divider: Divider):
        self.draw.line(
            [(divider.x, divider.y), (divider.x + divider.width, divider.y)],
            fill=DIVIDER_COLOR,
            width=DIVIDER_LINE_WIDTH,
        )

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float):
        """Scale an image to width x height and paste it at (x, y) using its alpha"""
        target = (max(1, round(width)), max(1, round(height)))
        scaled = image.convert('RGBA')
        if scaled.size != target:
            scaled = scaled.resize(target, Image.Resampling.LANCZOS)
        self.image.paste(scaled, (round(x), round(y)), scaled)

    def fill_rect(self, x: float, y: float, width: float, height: float, fill):
        self.draw.rectangle([x, y, x + width, y + height], fill=fill)

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format='PNG')
        return buffer.getvalue()
