"""
Rich-text wrapping and auto-fit layout for card text boxes.

Every function here is pure: it asks a measurer for string widths and returns
positioned lines, it never draws. The measurer is any object exposing
``measure_text(text, font, size) -> float`` matching how the final draw call
will render (see crucible.surface.PillowSurface).

Font sizes are searched by linear descent, one unit at a time, so the chosen
size is always the largest one that fits even when wrapping is not monotonic
in the size.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from ..config import (
    DEBUG_TEXT_FITTING,
    DIVIDER_THICKNESS,
    DIVIDER_WIDTH_RATIO,
    FONT_HEIGHT_RATIO,
    PARAGRAPH_SPACING_RATIO,
    SINGLE_LINE_MIN_SIZE,
    SYMBOL_SPACING_RATIO,
    SYMBOL_WIDTH_RATIO,
    VERTICAL_PAD_RATIO,
    WRAPPED_TEXT_MIN_SIZE,
)
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

ALIGNMENTS = ('left', 'center', 'right')


class TextMeasurer(Protocol):
    def measure_text(self, text: str, font: str, size: float) -> float:
        ...


@dataclass(frozen=True)
class WrappedLine:
    text: str
    # True only for the first line of every paragraph after the first
    para_start: bool = False


@dataclass(frozen=True)
class TextBox:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PlacedLine:
    text: str
    x: float
    baseline: float
    font: str
    size: float


@dataclass(frozen=True)
class Divider:
    x: float
    y: float
    width: float


@dataclass(frozen=True)
class FittedBlock:
    size: float
    height: float
    lines: Tuple[PlacedLine, ...]
    divider: Optional[Divider] = None


def measure_rich_text(measurer: TextMeasurer, text: str, font: str, size: float) -> float:
    """
    Width of text with inline symbols.

    Text tokens are measured by the measurer; each symbol token occupies a
    fixed square footprint plus spacing whether or not an image exists for it.
    """
    symbol_width = size * SYMBOL_WIDTH_RATIO
    spacing = size * SYMBOL_SPACING_RATIO
    width = 0.0
    for token in tokenize(text):
        if token.is_symbol:
            width += symbol_width + spacing
        else:
            width += measurer.measure_text(token.value, font, size)
    return width


def split_paragraphs(text: str) -> List[str]:
    """Split on explicit newlines, dropping blank paragraphs"""
    return [p for p in text.split('\n') if p.strip()]


def wrap_paragraphs(measurer: TextMeasurer, paragraphs: Sequence[str], max_width: float,
                    font: str, size: float) -> List[WrappedLine]:
    """
    Greedily wrap paragraphs into lines no wider than max_width.

    A word that is wider than max_width on its own is emitted as an overlong
    line; words are never split.

    Args:
        measurer: Width provider for the current font
        paragraphs: Pre-split paragraphs, blank ones already removed
        max_width: Line width budget
        font: Font family name
        size: Font size

    Returns:
        Ordered list of WrappedLine
    """
    lines = []
    for para_index, paragraph in enumerate(paragraphs):
        current = ''
        first = True
        for word in paragraph.split(' '):
            candidate = f'{current} {word}' if current else word
            if current and measure_rich_text(measurer, candidate, font, size) > max_width:
                lines.append(WrappedLine(current, first and para_index > 0))
                current = word
                first = False
            else:
                current = candidate
        if current:
            lines.append(WrappedLine(current, first and para_index > 0))
    return lines


def compute_height(lines: Sequence[WrappedLine], size: float, para_spacing: float) -> float:
    """First line contributes size; each later line size, plus para_spacing at paragraph starts"""
    height = size
    for line in lines[1:]:
        height += size
        if line.para_start:
            height += para_spacing
    return height


def _vertical_offset(box_height: float, text_height: float, size: float) -> float:
    return (box_height - text_height + size * VERTICAL_PAD_RATIO) / 2


def _place_lines(lines: Sequence[WrappedLine], x: float, top: float, font: str,
                 size: float, para_spacing: float) -> Tuple[List[PlacedLine], float]:
    """
    Stack wrapped lines downward from top.

    Returns:
        (placed lines, offset of the last line's top relative to top)
    """
    placed = []
    cursor = 0.0
    for i, line in enumerate(lines):
        if i > 0:
            cursor += size
            if line.para_start:
                cursor += para_spacing
        placed.append(PlacedLine(line.text, x, top + cursor + size * FONT_HEIGHT_RATIO, font, size))
    return placed, cursor


def fit_wrapped_text(measurer: TextMeasurer, text: str, box: TextBox, font: str,
                     start_size: float, min_size: float = WRAPPED_TEXT_MIN_SIZE) -> Optional[FittedBlock]:
    """
    Find the largest font size at which text wraps into box, and place it.

    Candidate sizes run start_size, start_size - 1, ... while strictly above
    min_size. If none fits, the block is not laid out at all and None is
    returned; there is no fallback at the floor size.

    Args:
        measurer: Width provider
        text: Text with optional newline paragraph breaks and {X} symbols
        box: Target box
        font: Font family name
        start_size: Largest size to try
        min_size: Exclusive floor

    Returns:
        FittedBlock with vertically centered lines, or None when nothing fits
    """
    paragraphs = split_paragraphs(text)
    size = start_size

    while size > min_size:
        lines = wrap_paragraphs(measurer, paragraphs, box.width, font, size)
        para_spacing = size * PARAGRAPH_SPACING_RATIO
        total_height = compute_height(lines, size, para_spacing)
        if total_height <= box.height:
            top = box.y + _vertical_offset(box.height, total_height, size)
            placed, _ = _place_lines(lines, box.x, top, font, size, para_spacing)
            if DEBUG_TEXT_FITTING:
                logger.debug('Fitted %d lines at size %s (height %.1f of %.1f)',
                             len(lines), size, total_height, box.height)
            return FittedBlock(size, total_height, tuple(placed))
        size -= 1

    logger.info('No usable font size for %d-character block in %.0fx%.0f box; block omitted',
                len(text), box.width, box.height)
    return None


def fit_single_line(measurer: TextMeasurer, text: str, box: TextBox, font: str,
                    start_size: float, align: str = 'left') -> PlacedLine:
    """
    Shrink a non-wrapping field until it fits box.width, then align it.

    Always returns a line; the smallest size used is SINGLE_LINE_MIN_SIZE.
    """
    if align not in ALIGNMENTS:
        raise ValueError(f"Unknown alignment '{align}', expected one of {ALIGNMENTS}")

    size = start_size
    while size > SINGLE_LINE_MIN_SIZE:
        if measurer.measure_text(text, font, size) <= box.width:
            break
        size -= 1

    width = measurer.measure_text(text, font, size)
    x = box.x
    if align == 'center':
        x = box.x + (box.width - width) / 2
    elif align == 'right':
        x = box.x + box.width - width

    baseline = box.y + _vertical_offset(box.height, size, size) + size * FONT_HEIGHT_RATIO
    return PlacedLine(text, x, baseline, font, size)


def fit_rules_and_flavor(measurer: TextMeasurer, rules_text: str, flavor_text: str, box: TextBox,
                         font: str, flavor_font: str, start_size: float,
                         min_size: float = WRAPPED_TEXT_MIN_SIZE) -> Optional[FittedBlock]:
    """
    Fit rules text, a divider and flavor text into one box as a single unit.

    Both sections share one candidate size per iteration. The trial height is
    rules height + size + divider thickness + size + flavor height. Same
    exclusive floor and no-fallback policy as fit_wrapped_text.

    Returns:
        FittedBlock whose lines hold rules lines then flavor lines, with the
        divider set; None when nothing fits
    """
    rules_paragraphs = split_paragraphs(rules_text)
    flavor_paragraphs = split_paragraphs(flavor_text)
    size = start_size

    while size > min_size:
        rules_lines = wrap_paragraphs(measurer, rules_paragraphs, box.width, font, size)
        flavor_size = size
        flavor_lines = wrap_paragraphs(measurer, flavor_paragraphs, box.width, flavor_font, flavor_size)

        para_spacing = size * PARAGRAPH_SPACING_RATIO
        flavor_spacing = flavor_size * PARAGRAPH_SPACING_RATIO
        total_height = compute_height(rules_lines, size, para_spacing)
        total_height += size + DIVIDER_THICKNESS + size
        total_height += compute_height(flavor_lines, flavor_size, flavor_spacing)

        if total_height <= box.height:
            top = box.y + _vertical_offset(box.height, total_height, size)
            placed, last_top = _place_lines(rules_lines, box.x, top, font, size, para_spacing)

            cursor = last_top + size + size * 0.5
            divider_width = box.width * DIVIDER_WIDTH_RATIO
            divider = Divider(box.x + (box.width - divider_width) / 2, top + cursor, divider_width)

            cursor += DIVIDER_THICKNESS + size * 0.5
            flavor_placed, _ = _place_lines(flavor_lines, box.x, top + cursor, flavor_font,
                                            flavor_size, flavor_spacing)
            placed.extend(flavor_placed)
            if DEBUG_TEXT_FITTING:
                logger.debug('Fitted rules+flavor at size %s (height %.1f of %.1f)',
                             size, total_height, box.height)
            return FittedBlock(size, total_height, tuple(placed), divider)
        size -= 1

    logger.info('No usable font size for rules+flavor block in %.0fx%.0f box; block omitted',
                box.width, box.height)
    return None
