"""
Box geometry for each card layout.

All positions are fractions of the canvas width (x, w) and height (y, h);
'size' is a starting font size as a fraction of the canvas height.
"""

from typing import Dict

from .config import BADGE_FONT, NAME_FONT, RULES_FONT
from .text_processing.text_fitting import TextBox

STANDARD_LAYOUT = {
    'art': {'x': 0.0767, 'y': 0.1129, 'w': 0.8476, 'h': 0.4429},
    'name': {'x': 168 / 2010, 'y': 145 / 2814, 'w': 0.8292, 'h': 0.0543, 'size': 0.0381, 'font': NAME_FONT},
    'mana': {'y': 176 / 2814, 'w': 1864 / 2010, 'size': 70.5 / 1638},
    'type': {'x': 168 / 2010, 'y': 1588 / 2814, 'w': 0.8292, 'h': 0.0543, 'size': 0.0324, 'font': NAME_FONT},
    'rules': {'x': 0.086, 'y': 1780 / 2814, 'w': 0.828, 'h': 0.2875, 'size': 0.0362, 'font': RULES_FONT},
    'pt': {'x': 0.7928, 'y': 0.902, 'w': 0.1367, 'h': 0.0372, 'size': 0.0372, 'font': BADGE_FONT},
    'pt_box': {'x': 0.7573, 'y': 0.8848, 'w': 0.188, 'h': 0.0733},
    # x is the right edge, y the vertical center
    'set_symbol': {'x': 1862 / 2010, 'y': 0.5910, 'h': 0.0410},
}

PLANESWALKER_LAYOUT = {
    'art': {'x': 0.0767, 'y': 0.1129, 'w': 0.8476, 'h': 0.4429},
    'name': {'x': 0.0867, 'y': 0.0372, 'w': 0.8267, 'h': 0.0548, 'size': 0.0381, 'font': NAME_FONT},
    'mana': {'y': 0.0481, 'w': 0.9292, 'size': 71 / 1638},
    'type': {'x': 0.0867, 'y': 0.5625, 'w': 0.8267, 'h': 0.0548, 'size': 0.0324, 'font': NAME_FONT},
    'ability': {'x': 0.18, 'y': 0.6239, 'w': 0.7467, 'size': 0.0353, 'font': RULES_FONT},
    'ability_band': {'x': 0.1167, 'w': 0.8094},
    'ability_total_h': 0.2916,
    'cost': {'x': 0.028, 'w': 0.1414, 'h': 0.0548, 'size': 0.0286, 'font': BADGE_FONT},
    'loyalty': {'x': 0.806, 'y': 0.902, 'w': 0.14, 'h': 0.0372, 'size': 0.0372, 'font': BADGE_FONT},
}

SAGA_LAYOUT = {
    'art': {'x': 0.5, 'y': 0.1124, 'w': 0.4247, 'h': 0.7253},
    'name': {'x': 0.0854, 'y': 0.0522, 'w': 0.8292, 'h': 0.0543, 'size': 0.0381, 'font': NAME_FONT},
    'mana': {'y': 0.0613, 'w': 0.9292, 'size': 71 / 1638},
    'type': {'x': 0.0854, 'y': 0.8481, 'w': 0.8292, 'h': 0.0543, 'size': 0.0324, 'font': NAME_FONT},
    'ability': {'x': 0.1334, 'y': 0.2896, 'w': 0.35, 'h': 0.1786, 'size': 0.0305, 'font': RULES_FONT},
    # chapter text blocks share this much of the canvas height between them
    'ability_total_h': 0.55,
    'saga': {'x': 0.1, 'w': 0.3947},
    'chapter': {'x_off': -0.0614, 'w': 0.0787, 'h': 0.0629, 'size': 0.0324, 'font': RULES_FONT},
    'chapter_spread': 0.0358,
}

BATTLE_LAYOUT = {
    'art': {'x': 167 / 2100, 'y': 60 / 1500, 'w': 1873 / 2100, 'h': 1371 / 1500},
    'name': {'x': 387 / 2100, 'y': 81 / 1500, 'w': 1547 / 2100, 'h': 114 / 1500,
             'size': (0.0381 * 2100) / 1500, 'font': NAME_FONT},
    'mana': {'y': 100 / 1500, 'w': 1957 / 2100, 'size': ((71 / 1638) * 2100) / 1500},
    'type': {'x': 268 / 2100, 'y': 873 / 1500, 'w': 1667 / 2100, 'h': 114 / 1500,
             'size': (0.0324 * 2100) / 1500, 'font': NAME_FONT},
    'rules': {'x': 272 / 2100, 'y': 1008 / 1500, 'w': 1661 / 2100, 'h': 414 / 1500,
              'size': (0.0362 * 2100) / 1500, 'font': RULES_FONT},
    'defense': {'x': 1920 / 2100, 'y': 1320 / 1500, 'w': 86 / 2100, 'h': 123 / 1500,
                'size': (0.0372 * 2100) / 1500, 'font': BADGE_FONT},
}


def scale_box(region: Dict, canvas_width: float, canvas_height: float) -> TextBox:
    """Convert a fractional region to a pixel TextBox"""
    return TextBox(
        region['x'] * canvas_width,
        region['y'] * canvas_height,
        region['w'] * canvas_width,
        region['h'] * canvas_height,
    )
