"""
Inline symbol tokenization for card text.

Card text embeds symbol references in braces, e.g. "{T}: Add {C}{C}." or
"{1}{G/P}". This module splits such strings into literal-text and symbol
tokens so measurement and drawing can treat symbols as fixed-size glyphs.
"""

import re
from typing import List, NamedTuple

TEXT = 'text'
SYMBOL = 'symbol'

_MANA_SYMBOL_PATTERN = re.compile(r'\{([^}]+)\}')


class Token(NamedTuple):
    kind: str
    value: str

    @property
    def is_symbol(self) -> bool:
        return self.kind == SYMBOL


def tokenize(text: str) -> List[Token]:
    """
    Split text into literal-text and symbol tokens.

    Symbol contents are kept verbatim ("G/P" stays "G/P"). An opening brace
    with no closing brace after it turns the rest of the string into a single
    text token rather than being dropped.

    Args:
        text: Card text, possibly containing {X} symbol references

    Returns:
        List of Token tuples in left-to-right order
    """
    tokens = []
    pos = 0
    length = len(text)

    while pos < length:
        open_idx = text.find('{', pos)
        if open_idx == -1:
            tokens.append(Token(TEXT, text[pos:]))
            break
        if open_idx > pos:
            tokens.append(Token(TEXT, text[pos:open_idx]))

        close_idx = text.find('}', open_idx)
        if close_idx == -1:
            # Unterminated brace
            tokens.append(Token(TEXT, text[open_idx:]))
            break

        tokens.append(Token(SYMBOL, text[open_idx + 1:close_idx]))
        pos = close_idx + 1

    return tokens


def parse_mana_symbols(mana_cost: str) -> List[str]:
    """Parse a mana cost string like "{2}{W}{W}" into ['2', 'W', 'W']"""
    return _MANA_SYMBOL_PATTERN.findall(mana_cost or '')


def join_tokens(tokens: List[Token]) -> str:
    """Rebuild the source string from tokens, re-wrapping symbols in braces"""
    return ''.join('{%s}' % t.value if t.is_symbol else t.value for t in tokens)
