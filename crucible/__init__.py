"""
Crucible: renders trading-card images from free-text card descriptions.
"""

from .card_types import (
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
from .text_processing import CardParseError, parse_card
from .surface import PillowSurface, SymbolCache
from .card_renderer import CardRenderer, render_card_text

__all__ = [
    'BattleCard',
    'CardRecord',
    'CollectorInfo',
    'LoyaltyAbility',
    'PlaneswalkerCard',
    'Rarity',
    'SagaCard',
    'SagaChapter',
    'StandardCard',
    'CardParseError',
    'parse_card',
    'PillowSurface',
    'SymbolCache',
    'CardRenderer',
    'render_card_text',
]
