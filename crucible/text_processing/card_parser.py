"""
Parsing of free-text card descriptions into typed card records.

Expected shape (blank lines ignored, every line trimmed):

    Name {cost}{symbols}
    [Art: <url>] [Rarity: <rarity>] [Artist: ..] [Set: ..] [Number: ..]
    Type line
    body lines...

The type line picks the record variant (planeswalker, saga, battle or
standard) and the body is interpreted per variant. Frame color is always
derived from the mana cost and type line, never authored.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from ..card_types import (
    BattleCard,
    CardRecord,
    CollectorInfo,
    LoyaltyAbility,
    PlaneswalkerCard,
    Rarity,
    SagaCard,
    SagaChapter,
    StandardCard,
)
from ..config import DEBUG_PARSER
from .tokenizer import parse_mana_symbols

logger = logging.getLogger(__name__)

NAME_AND_COST_PATTERN = re.compile(r'^(.+?)\s+((?:\{[^}]+\})+)$')
PT_PATTERN = re.compile(r'^([*\d+]+)/([*\d+]+)$')
LOYALTY_PATTERN = re.compile(r'^Loyalty:\s*(\S+)$', re.IGNORECASE)
DEFENSE_PATTERN = re.compile(r'^Defense:\s*(\S+)$', re.IGNORECASE)
LOYALTY_ABILITY_PATTERN = re.compile(r'^([+\-−]?\d+):\s*(.+)$')
SAGA_CHAPTER_PATTERN = re.compile(
    r'^((?:I{1,3}|IV|V|VI)(?:\s*,\s*(?:I{1,3}|IV|V|VI))*)\s*[—–-]\s*(.+)$'
)
FLAVOR_LINE_PATTERN = re.compile(r'^\*(.+)\*$')
FLAVOR_SEPARATOR = '---'

# Leading keyword -> metadata field, for lines between the name and the type line
METADATA_PATTERNS = {
    'art_url': re.compile(r'^Art:\s*(.+)$', re.IGNORECASE),
    'rarity': re.compile(r'^Rarity:\s*(.+)$', re.IGNORECASE),
    'artist': re.compile(r'^Artist:\s*(.+)$', re.IGNORECASE),
    'set_code': re.compile(r'^Set:\s*(\S+)$', re.IGNORECASE),
    'collector_number': re.compile(r'^Number:\s*(\S+)$', re.IGNORECASE),
}

BASIC_COLORS = ['W', 'U', 'B', 'R', 'G']


class CardParseError(ValueError):
    """Raised when card text is too malformed to guess a structure from"""


def normalize_rarity(value: str) -> Optional[Rarity]:
    """
    Normalize a rarity word, case-insensitively.

    "Mythic Rare" and "mythic" both become Rarity.MYTHIC. Unknown words
    return None.
    """
    cleaned = ' '.join(value.lower().split())
    if cleaned in ('mythic', 'mythic rare'):
        return Rarity.MYTHIC
    try:
        return Rarity(cleaned)
    except ValueError:
        return None


def derive_frame_color(mana_cost: Optional[str], type_line: str) -> str:
    """
    Derive the single-letter frame color of a card.

    Args:
        mana_cost: Raw mana cost like "{2}{W}{W}", or None
        type_line: Full type line

    Returns:
        'v' for vehicles, 'l' for costless lands, 'a' for colorless,
        the color letter for mono-colored, 'm' for two or more colors
    """
    lower_type = type_line.lower()
    if 'vehicle' in lower_type:
        return 'v'
    if 'land' in lower_type and not mana_cost:
        return 'l'

    colors = set()
    for symbol in parse_mana_symbols(mana_cost or ''):
        inner = symbol.upper()
        # hybrid and phyrexian symbols may carry more than one letter
        for color in BASIC_COLORS:
            if color in inner:
                colors.add(color.lower())

    if not colors:
        return 'a'
    if len(colors) == 1:
        return colors.pop()
    return 'm'


def _split_name_and_cost(line: str) -> Tuple[str, Optional[str]]:
    match = NAME_AND_COST_PATTERN.match(line)
    if match:
        return match.group(1).strip(), match.group(2)
    return line, None


def _read_metadata(lines: List[str]) -> Tuple[Dict[str, str], int]:
    """
    Consume metadata marker lines following the name line.

    Returns:
        (field -> raw value, index of the type line in lines)
    """
    metadata = {}
    index = 1
    while index < len(lines):
        line = lines[index]
        for field, pattern in METADATA_PATTERNS.items():
            match = pattern.match(line)
            if match:
                if field in metadata:
                    logger.warning("Ignoring repeated metadata line '%s'", line)
                else:
                    metadata[field] = match.group(1).strip()
                break
        else:
            return metadata, index
        index += 1
    return metadata, index


def parse_card(text: str) -> CardRecord:
    """
    Parse a card description into a typed card record.

    Args:
        text: Multi-line card description

    Returns:
        StandardCard, PlaneswalkerCard, SagaCard or BattleCard

    Raises:
        CardParseError: if there is no name line and type line
    """
    lines = [line.strip() for line in text.split('\n')]
    lines = [line for line in lines if line]

    if len(lines) < 2:
        raise CardParseError('Card text must have at least a name line and type line')

    name, mana_cost = _split_name_and_cost(lines[0])
    metadata, type_index = _read_metadata(lines)
    if type_index >= len(lines):
        raise CardParseError('Card text must have at least a name line and type line')

    type_line = lines[type_index]
    body_lines = lines[type_index + 1:]
    lower_type = type_line.lower()

    rarity = None
    if 'rarity' in metadata:
        rarity = normalize_rarity(metadata['rarity'])
        if rarity is None:
            logger.warning("Unknown rarity '%s' ignored", metadata['rarity'])

    common = dict(
        name=name,
        type_line=type_line,
        frame_color=derive_frame_color(mana_cost, type_line),
        mana_cost=mana_cost,
        rarity=rarity,
        is_legendary='legendary' in lower_type,
        art_url=metadata.get('art_url'),
        collector=CollectorInfo(
            artist=metadata.get('artist'),
            set_code=metadata.get('set_code'),
            collector_number=metadata.get('collector_number'),
        ),
    )

    if 'planeswalker' in lower_type:
        card = _parse_planeswalker(common, body_lines)
    elif 'saga' in lower_type:
        card = _parse_saga(common, body_lines)
    elif 'battle' in lower_type:
        card = _parse_battle(common, body_lines)
    else:
        card = _parse_standard(common, body_lines)

    if DEBUG_PARSER:
        logger.debug("Parsed '%s' as %s card (frame %s)", name, card.layout, card.frame_color)
    return card


def _match_pt(line: str) -> Optional[Tuple[str, str]]:
    match = PT_PATTERN.match(line)
    if match:
        return match.group(1), match.group(2)
    return None


def _split_trailing_flavor(lines: List[str]) -> Tuple[List[str], List[str]]:
    """
    Peel trailing *asterisk-wrapped* lines off as flavor text.

    Parenthesised reminder text in asterisks stays in the rules, and so do
    wildcard P/T lines like */1+*.
    """
    flavor = []
    end = len(lines)
    while end > 0:
        line = lines[end - 1]
        match = FLAVOR_LINE_PATTERN.match(line)
        if not match or match.group(1).startswith('(') or PT_PATTERN.match(line):
            break
        flavor.insert(0, match.group(1))
        end -= 1
    return lines[:end], flavor


def _parse_standard(common: Dict, body_lines: List[str]) -> StandardCard:
    lines = list(body_lines)
    power = toughness = None
    flavor_lines = []

    lower_type = common['type_line'].lower()
    has_pt = 'creature' in lower_type or 'vehicle' in lower_type

    if has_pt and lines:
        pt = _match_pt(lines[-1])
        if pt:
            power, toughness = pt
            lines = lines[:-1]

    if FLAVOR_SEPARATOR in lines:
        sep_index = lines.index(FLAVOR_SEPARATOR)
        rules_lines = lines[:sep_index]
        flavor_lines = lines[sep_index + 1:]
    else:
        rules_lines, flavor_lines = _split_trailing_flavor(lines)
        # P/T may sit above the flavor lines
        if flavor_lines and has_pt and power is None and rules_lines:
            pt = _match_pt(rules_lines[-1])
            if pt:
                power, toughness = pt
                rules_lines = rules_lines[:-1]

    return StandardCard(
        rules_text='\n'.join(rules_lines) or None,
        flavor_text='\n'.join(flavor_lines) or None,
        power=power,
        toughness=toughness,
        **common,
    )


def _parse_planeswalker(common: Dict, body_lines: List[str]) -> PlaneswalkerCard:
    abilities = []
    starting_loyalty = '0'

    for line in body_lines:
        loyalty_match = LOYALTY_PATTERN.match(line)
        if loyalty_match:
            starting_loyalty = loyalty_match.group(1)
            continue

        ability_match = LOYALTY_ABILITY_PATTERN.match(line)
        if ability_match:
            cost = ability_match.group(1).replace('−', '-')
            abilities.append(LoyaltyAbility(cost, ability_match.group(2)))
        else:
            # Static ability
            abilities.append(LoyaltyAbility('', line))

    return PlaneswalkerCard(starting_loyalty=starting_loyalty, abilities=tuple(abilities), **common)


def _parse_saga(common: Dict, body_lines: List[str]) -> SagaCard:
    chapters = []
    for line in body_lines:
        match = SAGA_CHAPTER_PATTERN.match(line)
        if match:
            count = len(match.group(1).split(','))
            chapters.append(SagaChapter(count, match.group(2).strip()))
        elif DEBUG_PARSER:
            logger.debug("Dropping non-chapter saga line '%s'", line)
    return SagaCard(chapters=tuple(chapters), **common)


def _parse_battle(common: Dict, body_lines: List[str]) -> BattleCard:
    defense = '0'
    rules_lines = []
    for line in body_lines:
        match = DEFENSE_PATTERN.match(line)
        if match:
            defense = match.group(1)
            continue
        rules_lines.append(line)
    return BattleCard(defense=defense, rules_text='\n'.join(rules_lines) or None, **common)
