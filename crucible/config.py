"""
Configuration constants for the Crucible card rendering system.
"""

import os

# ===== TEXT ENGINE RATIOS =====
# Baseline offset from the top of a line box, as a fraction of the font size
FONT_HEIGHT_RATIO = 0.7

# Inline symbols are square glyphs scaled from the current font size
SYMBOL_WIDTH_RATIO = 0.78
SYMBOL_SPACING_RATIO = 0.06

# Extra vertical space added on top of the normal advance at a paragraph break
PARAGRAPH_SPACING_RATIO = 0.35

# Added to the free space before halving it when centering a block vertically
VERTICAL_PAD_RATIO = 0.15

# ===== AUTO-FIT FLOORS =====
# Wrapped blocks are never drawn at or below this size
WRAPPED_TEXT_MIN_SIZE = 8
# Single-line fields always draw, at worst at this size
SINGLE_LINE_MIN_SIZE = 1

# ===== RULES / FLAVOR DIVIDER =====
DIVIDER_THICKNESS = 8
DIVIDER_WIDTH_RATIO = 0.85
DIVIDER_COLOR = (0, 0, 0, 89)  # black at ~35% opacity
DIVIDER_LINE_WIDTH = 2

# ===== CANVAS SIZES =====
STANDARD_SIZE = (2010, 2814)
PLANESWALKER_SIZE = (1500, 2100)
SAGA_SIZE = (1500, 2100)
BATTLE_SIZE = (2814, 2010)   # landscape
BACKGROUND_COLOR = '#1a1a1a'

# ===== FONT FAMILIES =====
NAME_FONT = 'Beleren Bold'
BADGE_FONT = 'Beleren Bold SmCaps'
RULES_FONT = 'MPlantin'
FLAVOR_FONT = 'MPlantin Italic'

# Family name -> file name inside CRUCIBLE_FONTS_DIR
FONT_FILES = {
    NAME_FONT: 'beleren-b.ttf',
    BADGE_FONT: 'beleren-bsc.ttf',
    RULES_FONT: 'mplantin.ttf',
    FLAVOR_FONT: 'mplantin-i.ttf',
}

# ===== ASSET LOCATIONS =====
# All optional; missing directories mean text-only rendering
FONTS_DIR = os.environ.get('CRUCIBLE_FONTS_DIR')
SYMBOLS_DIR = os.environ.get('CRUCIBLE_SYMBOLS_DIR')
FRAMES_DIR = os.environ.get('CRUCIBLE_FRAMES_DIR')

# ===== BOTTOM INFO LINE =====
DEFAULT_SET_CODE = 'CRU'
DEFAULT_COLLECTOR_NUMBER = '000'
WATERMARK_TEXT = 'mtg-crucible'

# ===== SERVER =====
HOST = os.environ.get('CRUCIBLE_HOST', '0.0.0.0')
PORT = int(os.environ.get('CRUCIBLE_PORT', '5000'))
LOG_LEVEL = os.environ.get('CRUCIBLE_LOG_LEVEL', 'INFO')

# ===== DEBUGGING FLAGS =====
# Control debug output verbosity
DEBUG_TEXT_FITTING = False
DEBUG_PARSER = False
