"""
Text processing modules for Crucible card rendering.

This package contains the inline symbol tokenizer, the rich-text wrapping and
auto-fit layout engine, and the free-text card description parser.
"""

# Import main functions for easy access
from .tokenizer import (
    Token,
    tokenize,
    parse_mana_symbols,
    join_tokens
)

from .text_fitting import (
    TextBox,
    WrappedLine,
    PlacedLine,
    Divider,
    FittedBlock,
    measure_rich_text,
    split_paragraphs,
    wrap_paragraphs,
    compute_height,
    fit_wrapped_text,
    fit_single_line,
    fit_rules_and_flavor
)

from .card_parser import (
    CardParseError,
    parse_card,
    derive_frame_color,
    normalize_rarity
)

__all__ = [
    # Tokenizing
    'Token',
    'tokenize',
    'parse_mana_symbols',
    'join_tokens',

    # Layout
    'TextBox',
    'WrappedLine',
    'PlacedLine',
    'Divider',
    'FittedBlock',
    'measure_rich_text',
    'split_paragraphs',
    'wrap_paragraphs',
    'compute_height',
    'fit_wrapped_text',
    'fit_single_line',
    'fit_rules_and_flavor',

    # Parsing
    'CardParseError',
    'parse_card',
    'derive_frame_color',
    'normalize_rarity'
]
