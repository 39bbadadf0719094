"""
Card records produced by the card description parser.

A card is exactly one of four variants: StandardCard, PlaneswalkerCard,
SagaCard or BattleCard. Records are frozen; sequences are stored as tuples
so declaration order is preserved and nothing downstream can mutate them.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class Rarity(str, Enum):
    COMMON = 'common'
    UNCOMMON = 'uncommon'
    RARE = 'rare'
    MYTHIC = 'mythic'


@dataclass(frozen=True)
class CollectorInfo:
    """Bottom-line collector metadata"""
    artist: Optional[str] = None
    set_code: Optional[str] = None
    collector_number: Optional[str] = None


@dataclass(frozen=True)
class LoyaltyAbility:
    # "" for a static ability, otherwise a signed integer string like "+1" or "-2"
    cost: str
    text: str

    @property
    def is_static(self) -> bool:
        return self.cost == ''


@dataclass(frozen=True)
class SagaChapter:
    # number of consecutive chapter markers this entry spans ("I, II" -> 2)
    count: int
    text: str


@dataclass(frozen=True)
class CardBase:
    name: str
    type_line: str
    frame_color: str
    mana_cost: Optional[str] = None
    rules_text: Optional[str] = None
    flavor_text: Optional[str] = None
    rarity: Optional[Rarity] = None
    is_legendary: bool = False
    art_url: Optional[str] = None
    collector: CollectorInfo = CollectorInfo()

    layout = 'base'

    @property
    def mana_symbols(self) -> List[str]:
        """Symbol references of the mana cost, in order"""
        from .text_processing.tokenizer import parse_mana_symbols
        return parse_mana_symbols(self.mana_cost or '')

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-friendly representation.

        Returns:
            Dictionary with a 'layout' discriminator and every field;
            the rarity enum is flattened to its string value.
        """
        data = asdict(self)
        if self.rarity is not None:
            data['rarity'] = self.rarity.value
        data['layout'] = self.layout
        return data


@dataclass(frozen=True)
class StandardCard(CardBase):
    power: Optional[str] = None
    toughness: Optional[str] = None

    layout = 'standard'

    @property
    def has_pt(self) -> bool:
        return self.power is not None and self.toughness is not None


@dataclass(frozen=True)
class PlaneswalkerCard(CardBase):
    starting_loyalty: str = '0'
    abilities: Tuple[LoyaltyAbility, ...] = ()

    layout = 'planeswalker'


@dataclass(frozen=True)
class SagaCard(CardBase):
    chapters: Tuple[SagaChapter, ...] = ()

    layout = 'saga'


@dataclass(frozen=True)
class BattleCard(CardBase):
    defense: str = '0'

    layout = 'battle'


CardRecord = Union[StandardCard, PlaneswalkerCard, SagaCard, BattleCard]
