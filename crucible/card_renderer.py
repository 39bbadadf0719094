"""
Card image rendering on top of the text engine.

Each card variant has its own layout routine: it looks up box geometry,
asks the text engine for fitted and positioned text, and draws the result on
a PillowSurface. Frame artwork and symbol images are optional; anything
missing is skipped and the card is still rendered with its text.
"""

import base64
import logging
import os
import time
from typing import Dict, Optional

from PIL import Image, ImageOps

from . import config
from .card_types import BattleCard, CardRecord, PlaneswalkerCard, SagaCard, StandardCard
from .layout import (
    BATTLE_LAYOUT,
    PLANESWALKER_LAYOUT,
    SAGA_LAYOUT,
    STANDARD_LAYOUT,
    scale_box,
)
from .surface import PillowSurface, SymbolCache
from .text_processing.card_parser import parse_card
from .text_processing.text_fitting import (
    TextBox,
    fit_rules_and_flavor,
    fit_single_line,
    fit_wrapped_text,
)
from .text_processing.tokenizer import parse_mana_symbols

logger = logging.getLogger(__name__)

ROMAN_NUMERALS = ['I', 'II', 'III', 'IV', 'V', 'VI']

# Alternating planeswalker ability band shading
ABILITY_BAND_COLORS = [(255, 255, 255, 155), (164, 164, 164, 180)]


def roman_numeral(n: int) -> str:
    """Chapter numeral for n; falls back to arabic digits past VI"""
    if 1 <= n <= len(ROMAN_NUMERALS):
        return ROMAN_NUMERALS[n - 1]
    return str(n)


def load_font_paths(fonts_dir: Optional[str]) -> Dict[str, str]:
    """Map font families to files that exist in fonts_dir"""
    if not fonts_dir:
        return {}
    fonts = {}
    for family, file_name in config.FONT_FILES.items():
        path = os.path.join(fonts_dir, file_name)
        if os.path.exists(path):
            fonts[family] = path
        else:
            logger.warning("Font file for '%s' not found at %s, using default font", family, path)
    return fonts


class CardRenderer:
    """
    Renders parsed card records to images.

    The symbol cache is passed in rather than held globally so tests and
    servers can decide when it is populated.
    """

    def __init__(self, fonts: Optional[Dict[str, str]] = None, symbols: Optional[SymbolCache] = None,
                 frames_dir: Optional[str] = None):
        """
        Args:
            fonts: Family name -> font file path; missing families use the default font
            symbols: Symbol images for mana costs and inline rules symbols
            frames_dir: Folder with <layout>/<frame color>.png frame images
        """
        self.fonts = fonts or {}
        self.symbols = symbols if symbols is not None else SymbolCache()
        self.frames_dir = frames_dir
        self._image_cache: Dict[str, Optional[Image.Image]] = {}

    @classmethod
    def from_config(cls) -> 'CardRenderer':
        """Build a renderer from the CRUCIBLE_* asset directories"""
        symbols = SymbolCache.from_directory(config.SYMBOLS_DIR) if config.SYMBOLS_DIR else SymbolCache()
        return cls(load_font_paths(config.FONTS_DIR), symbols, config.FRAMES_DIR)

    # ----- public API -----

    def render(self, card: CardRecord, artwork: Optional[Image.Image] = None) -> Image.Image:
        """
        Render a card record.

        Args:
            card: Any card record variant
            artwork: Already-decoded art image, cropped to fit the art box

        Returns:
            RGBA PIL image sized for the card's layout
        """
        return self._render_surface(card, artwork).image

    def render_png(self, card: CardRecord, artwork: Optional[Image.Image] = None) -> bytes:
        return self._render_surface(card, artwork).to_png()

    def render_base64(self, card: CardRecord, artwork: Optional[Image.Image] = None) -> str:
        """Base64 encoded PNG of the rendered card"""
        return base64.b64encode(self.render_png(card, artwork)).decode('utf-8')

    def render_text(self, text: str, artwork: Optional[Image.Image] = None) -> Image.Image:
        """Parse a card description and render it"""
        return self.render(parse_card(text), artwork)

    def _render_surface(self, card: CardRecord, artwork: Optional[Image.Image]) -> PillowSurface:
        render_start = time.time()
        if isinstance(card, PlaneswalkerCard):
            surface = self._render_planeswalker(card, artwork)
        elif isinstance(card, SagaCard):
            surface = self._render_saga(card, artwork)
        elif isinstance(card, BattleCard):
            surface = self._render_battle(card, artwork)
        elif isinstance(card, StandardCard):
            surface = self._render_standard(card, artwork)
        else:
            raise TypeError(f'Unsupported card record: {type(card).__name__}')

        logger.info("Rendered %s card '%s' in %.3fs", card.layout, card.name, time.time() - render_start)
        return surface

    # ----- shared drawing helpers -----

    def _new_surface(self, size) -> PillowSurface:
        return PillowSurface(size[0], size[1], self.fonts, config.BACKGROUND_COLOR)

    def _load_image_cached(self, *parts: str) -> Optional[Image.Image]:
        """Load an image under frames_dir once; None if there is no such file"""
        if not self.frames_dir:
            return None
        path = os.path.join(self.frames_dir, *parts)
        if path not in self._image_cache:
            if os.path.exists(path):
                with Image.open(path) as image:
                    self._image_cache[path] = image.convert('RGBA')
            else:
                logger.debug('No frame image at %s', path)
                self._image_cache[path] = None
        return self._image_cache[path]

    def _draw_frame(self, surface: PillowSurface, layout_name: str, card: CardRecord):
        frame = self._load_image_cached(layout_name, f'{card.frame_color}.png')
        if frame is not None:
            width, height = surface.size
            surface.draw_image(frame, 0, 0, width, height)

    def _draw_artwork(self, surface: PillowSurface, artwork: Optional[Image.Image], region: Dict):
        if artwork is None:
            return
        width, height = surface.size
        box = scale_box(region, width, height)
        target = (max(1, round(box.width)), max(1, round(box.height)))
        cropped = ImageOps.fit(artwork.convert('RGBA'), target, Image.Resampling.LANCZOS)
        surface.draw_image(cropped, box.x, box.y, box.width, box.height)

    def _draw_single(self, surface: PillowSurface, text: str, region: Dict, align: str = 'left',
                     fill='black'):
        width, height = surface.size
        placed = fit_single_line(surface, text, scale_box(region, width, height), region['font'],
                                 region['size'] * height, align)
        surface.draw_line(placed, fill)

    def _draw_wrapped(self, surface: PillowSurface, text: str, box: TextBox, font: str, start_size: float,
                      fill='black'):
        block = fit_wrapped_text(surface, text, box, font, start_size)
        if block is None:
            logger.warning("Text did not fit its box and was omitted: '%s'", text[:60])
            return
        surface.draw_block(block, self.symbols, fill)

    def _draw_mana_cost(self, surface: PillowSurface, mana_cost: Optional[str], region: Dict):
        """Right-aligned row of mana symbols ending at region['w'] of the canvas width"""
        symbols = parse_mana_symbols(mana_cost or '')
        if not symbols:
            return

        width, height = surface.size
        text_size = region['size'] * height
        symbol_size = text_size * 0.78
        spacing = text_size * 0.04
        total_width = len(symbols) * (symbol_size + spacing * 2)
        center_y = region['y'] * height + text_size * 0.32

        x = region['w'] * width - total_width
        for symbol in symbols:
            image = self.symbols.get(symbol)
            if image is not None:
                surface.draw_image(image, x + spacing, center_y - symbol_size / 2, symbol_size, symbol_size)
            x += symbol_size + spacing * 2

    def _draw_header(self, surface: PillowSurface, card: CardRecord, layout: Dict):
        """Name, mana cost and type line"""
        self._draw_single(surface, card.name, layout['name'])
        self._draw_mana_cost(surface, card.mana_cost, layout['mana'])
        self._draw_single(surface, card.type_line, layout['type'])

    def _draw_bottom_info(self, surface: PillowSurface, card: CardRecord):
        width, height = surface.size
        font_size = height * 0.0143
        y = height * 0.955
        left_x = width * 0.0647
        right_x = width * 0.935
        collector = card.collector

        number = collector.collector_number or config.DEFAULT_COLLECTOR_NUMBER
        set_code = collector.set_code or config.DEFAULT_SET_CODE
        surface.draw_text(f'{number} • {set_code}', left_x, y, config.RULES_FONT, font_size, 'white')
        if collector.artist:
            surface.draw_text(f'Illus. {collector.artist}', left_x, y + font_size * 1.4,
                              config.RULES_FONT, font_size, 'white')

        mark_width = surface.measure_text(config.WATERMARK_TEXT, config.RULES_FONT, font_size)
        surface.draw_text(config.WATERMARK_TEXT, right_x - mark_width, y + font_size * 1.4,
                          config.RULES_FONT, font_size, 'white')

    def _draw_set_symbol(self, surface: PillowSurface, card: CardRecord, region: Dict):
        rarity = card.rarity.value if card.rarity else 'common'
        image = self.symbols.get(f'set-{rarity}')
        if image is None:
            return
        width, height = surface.size
        symbol_h = region['h'] * height
        symbol_w = symbol_h * image.width / image.height
        surface.draw_image(image, region['x'] * width - symbol_w, region['y'] * height - symbol_h / 2,
                           symbol_w, symbol_h)

    # ----- per-layout routines -----

    def _render_standard(self, card: StandardCard, artwork: Optional[Image.Image]) -> PillowSurface:
        layout = STANDARD_LAYOUT
        surface = self._new_surface(config.STANDARD_SIZE)
        width, height = surface.size

        self._draw_artwork(surface, artwork, layout['art'])
        self._draw_frame(surface, 'standard', card)

        if card.is_legendary:
            crown = self._load_image_cached('crowns', f'{card.frame_color}.png')
            if crown is not None:
                surface.draw_image(crown, 0, 0, width, crown.height * width / crown.width)

        if card.has_pt:
            pt_box = self._load_image_cached('pt', f'{card.frame_color}.png')
            if pt_box is not None:
                box = scale_box(layout['pt_box'], width, height)
                surface.draw_image(pt_box, box.x, box.y, box.width, box.height)

        self._draw_set_symbol(surface, card, layout['set_symbol'])
        self._draw_header(surface, card, layout)

        rules = layout['rules']
        box = scale_box(rules, width, height)
        start_size = rules['size'] * height
        if card.rules_text and card.flavor_text:
            block = fit_rules_and_flavor(surface, card.rules_text, card.flavor_text, box,
                                         rules['font'], config.FLAVOR_FONT, start_size)
            if block is None:
                logger.warning("Rules and flavor text of '%s' did not fit and were omitted", card.name)
            else:
                surface.draw_block(block, self.symbols)
        elif card.rules_text:
            self._draw_wrapped(surface, card.rules_text, box, rules['font'], start_size)
        elif card.flavor_text:
            self._draw_wrapped(surface, card.flavor_text, box, config.FLAVOR_FONT, start_size)

        if card.has_pt:
            # vehicle badges are dark
            fill = 'white' if card.frame_color == 'v' else 'black'
            self._draw_single(surface, f'{card.power}/{card.toughness}', layout['pt'], 'center', fill)

        self._draw_bottom_info(surface, card)
        return surface

    def _render_planeswalker(self, card: PlaneswalkerCard, artwork: Optional[Image.Image]) -> PillowSurface:
        layout = PLANESWALKER_LAYOUT
        surface = self._new_surface(config.PLANESWALKER_SIZE)
        width, height = surface.size

        self._draw_artwork(surface, artwork, layout['art'])

        ability_count = len(card.abilities)
        band_h = layout['ability_total_h'] / ability_count if ability_count else 0
        band = layout['ability_band']
        for i in range(ability_count):
            y = (layout['ability']['y'] + i * band_h) * height
            surface.fill_rect(band['x'] * width, y, band['w'] * width, band_h * height,
                              ABILITY_BAND_COLORS[i % 2])

        self._draw_frame(surface, 'planeswalker', card)

        ability = layout['ability']
        cost = layout['cost']
        for i, loyalty_ability in enumerate(card.abilities):
            band_top = (ability['y'] + i * band_h) * height
            if not loyalty_ability.is_static:
                cost_box = TextBox(cost['x'] * width, band_top + (band_h * height - cost['h'] * height) / 2,
                                   cost['w'] * width, cost['h'] * height)
                if loyalty_ability.cost.startswith('+'):
                    icon_name = 'planeswalkerPlus.png'
                elif loyalty_ability.cost.startswith('-'):
                    icon_name = 'planeswalkerMinus.png'
                else:
                    icon_name = 'planeswalkerNeutral.png'
                icon = self._load_image_cached('planeswalker', icon_name)
                if icon is not None:
                    surface.draw_image(icon, cost_box.x, cost_box.y, cost_box.width, cost_box.height)
                placed = fit_single_line(surface, loyalty_ability.cost, cost_box, cost['font'],
                                         cost['size'] * height, 'center')
                surface.draw_line(placed, 'white')

            text_box = TextBox(ability['x'] * width, band_top, ability['w'] * width, band_h * height)
            self._draw_wrapped(surface, loyalty_ability.text, text_box, ability['font'], ability['size'] * height)

        self._draw_header(surface, card, layout)
        self._draw_single(surface, card.starting_loyalty, layout['loyalty'], 'center', 'white')
        self._draw_bottom_info(surface, card)
        return surface

    def _render_saga(self, card: SagaCard, artwork: Optional[Image.Image]) -> PillowSurface:
        layout = SAGA_LAYOUT
        surface = self._new_surface(config.SAGA_SIZE)
        width, height = surface.size

        self._draw_artwork(surface, artwork, layout['art'])
        self._draw_frame(surface, 'saga', card)

        ability = layout['ability']
        saga = layout['saga']
        chapter = layout['chapter']
        chapter_count = len(card.chapters)
        chapter_h = min(ability['h'], layout['ability_total_h'] / chapter_count) if chapter_count else 0
        chapter_image = self._load_image_cached('saga', 'sagaChapter.png')

        numeral = 1
        for i, saga_chapter in enumerate(card.chapters):
            top = (ability['y'] + i * chapter_h) * height
            block_h = chapter_h * height
            saga_x = saga['x'] * width
            surface.draw.line([(saga_x, top), (saga_x + saga['w'] * width, top)], fill='black', width=3)

            marker_w = chapter['w'] * width
            marker_h = chapter['h'] * height
            marker_x = saga_x + chapter['x_off'] * width
            marker_y = top + (block_h - marker_h) / 2
            spread = layout['chapter_spread'] * height
            # markers of a combined chapter fan out around the block's center
            for j in range(saga_chapter.count):
                offset = (2 * j - (saga_chapter.count - 1)) * spread
                marker_box = TextBox(marker_x, marker_y + offset, marker_w, marker_h)
                if chapter_image is not None:
                    surface.draw_image(chapter_image, marker_box.x, marker_box.y, marker_w, marker_h)
                placed = fit_single_line(surface, roman_numeral(numeral + j), marker_box, chapter['font'],
                                         chapter['size'] * height, 'center')
                surface.draw_line(placed)
            numeral += saga_chapter.count

            text_box = TextBox(ability['x'] * width, top, ability['w'] * width, block_h)
            self._draw_wrapped(surface, saga_chapter.text, text_box, ability['font'], ability['size'] * height)

        self._draw_header(surface, card, layout)
        self._draw_bottom_info(surface, card)
        return surface

    def _render_battle(self, card: BattleCard, artwork: Optional[Image.Image]) -> PillowSurface:
        layout = BATTLE_LAYOUT
        surface = self._new_surface(config.BATTLE_SIZE)
        width, height = surface.size

        self._draw_artwork(surface, artwork, layout['art'])
        self._draw_frame(surface, 'battle', card)
        self._draw_header(surface, card, layout)

        if card.rules_text:
            rules = layout['rules']
            self._draw_wrapped(surface, card.rules_text, scale_box(rules, width, height),
                               rules['font'], rules['size'] * height)

        self._draw_single(surface, card.defense, layout['defense'], 'center', 'white')
        return surface


def render_card_text(text: str, renderer: Optional[CardRenderer] = None) -> Image.Image:
    """Parse and render a card description with a default text-only renderer"""
    return (renderer or CardRenderer()).render_text(text)
