import base64
import logging

import pytest
from PIL import Image

from crucible import card_renderer, config
from crucible.card_renderer import CardRenderer, load_font_paths, render_card_text, roman_numeral
from crucible.card_types import CardBase
from crucible.surface import PillowSurface, SymbolCache
from crucible.text_processing import TextBox, parse_card

PNG_MAGIC = b'\x89PNG\r\n\x1a\n'

BOLT = 'Lightning Bolt {R}\nInstant\nLightning Bolt deals 3 damage to any target.'

QUESTING_BEAST = """
Questing Beast {2}{G}{G}
Rarity: Mythic Rare
Artist: Igor Kieryluk
Legendary Creature — Beast
Vigilance, deathtouch, haste
Questing Beast can't be blocked by creatures with power 2 or less.
4/4
*"The beast never rests."*
"""

LILIANA = """
Liliana of the Veil {1}{B}{B}
Legendary Planeswalker — Liliana
+1: Each player discards a card.
-2: Target player sacrifices a creature.
-6: Separate all permanents target player controls into two piles.
Loyalty: 3
"""

FIRESIDE_TALE = """
Fireside Tale {2}{R}
Enchantment — Saga
I, II — Create a 1/1 red Goblin creature token.
III — Creatures you control get +2/+0 until end of turn.
"""

GOBAKHAN = """
Invasion of Gobakhan {1}{W}
Battle — Siege
When Invasion of Gobakhan enters the battlefield, look at target opponent's hand.
Defense: 3
"""


def solid(color, size=(10, 10)):
    return Image.new('RGBA', size, color)


class TestRomanNumeral:
    @pytest.mark.parametrize('n, expected', [(1, 'I'), (2, 'II'), (4, 'IV'), (6, 'VI'), (7, '7'), (0, '0')])
    def test_numerals(self, n, expected) -> None:
        assert roman_numeral(n) == expected


class TestRenderDimensions:
    def test_standard(self, renderer) -> None:
        image = renderer.render(parse_card(QUESTING_BEAST))
        assert image.size == config.STANDARD_SIZE
        assert image.mode == 'RGBA'

    def test_planeswalker(self, renderer) -> None:
        assert renderer.render(parse_card(LILIANA)).size == config.PLANESWALKER_SIZE

    def test_saga(self, renderer) -> None:
        assert renderer.render(parse_card(FIRESIDE_TALE)).size == config.SAGA_SIZE

    def test_battle_is_landscape(self, renderer) -> None:
        width, height = renderer.render(parse_card(GOBAKHAN)).size
        assert (width, height) == config.BATTLE_SIZE
        assert width > height

    def test_saga_with_more_than_six_chapters(self, renderer) -> None:
        chapters = '\n'.join(f'I — Chapter {n}.' for n in range(8))
        card = parse_card(f'Long Saga {{U}}\nEnchantment — Saga\n{chapters}')
        assert len(card.chapters) == 8
        assert renderer.render(card).size == config.SAGA_SIZE

    def test_empty_planeswalker_and_saga(self, renderer) -> None:
        assert renderer.render(parse_card('Blank {W}\nPlaneswalker — Blank')).size == config.PLANESWALKER_SIZE
        assert renderer.render(parse_card('Blank {W}\nEnchantment — Saga')).size == config.SAGA_SIZE

    def test_flavor_only_card(self, renderer) -> None:
        card = parse_card('Vanilla {G}\nCreature — Bear\n---\nJust a bear.\n2/2')
        assert renderer.render(card).size == config.STANDARD_SIZE


class TestRenderOutputs:
    def test_png_bytes(self, renderer) -> None:
        assert renderer.render_png(parse_card(BOLT)).startswith(PNG_MAGIC)

    def test_base64(self, renderer) -> None:
        data = base64.b64decode(renderer.render_base64(parse_card(BOLT)))
        assert data.startswith(PNG_MAGIC)

    def test_render_text(self, renderer) -> None:
        assert renderer.render_text(BOLT).size == config.STANDARD_SIZE

    def test_render_card_text_with_default_renderer(self) -> None:
        assert render_card_text(GOBAKHAN).size == config.BATTLE_SIZE

    def test_unsupported_record(self, renderer) -> None:
        with pytest.raises(TypeError, match='Unsupported card record'):
            renderer.render(CardBase(name='Nothing', type_line='Instant', frame_color='a'))

    def test_render_is_logged(self, renderer, caplog) -> None:
        with caplog.at_level(logging.INFO, logger='crucible.card_renderer'):
            renderer.render(parse_card(BOLT))
        assert "Rendered standard card 'Lightning Bolt'" in caplog.text


class TestSagaNumerals:
    def record_single_lines(self, monkeypatch):
        drawn = []
        original = card_renderer.fit_single_line

        def recording(measurer, text, box, font, start_size, align='left'):
            drawn.append(text)
            return original(measurer, text, box, font, start_size, align)

        monkeypatch.setattr(card_renderer, 'fit_single_line', recording)
        return drawn

    def chapter_numerals(self, drawn):
        return [text for text in drawn if text in ('I', 'II', 'III', 'IV', 'V', 'VI', '7', '8')]

    def test_combined_chapter_advances_counter(self, renderer, monkeypatch) -> None:
        drawn = self.record_single_lines(monkeypatch)
        renderer.render(parse_card(FIRESIDE_TALE))
        assert self.chapter_numerals(drawn) == ['I', 'II', 'III']

    def test_counter_runs_past_six(self, renderer, monkeypatch) -> None:
        drawn = self.record_single_lines(monkeypatch)
        card = parse_card('Epic {U}\nEnchantment — Saga\nI, II, III — Plan.\nIV, V — Build.\nVI — Wait.\nI, II — Strike.')
        renderer.render(card)
        assert self.chapter_numerals(drawn) == ['I', 'II', 'III', 'IV', 'V', 'VI', '7', '8']


class TestAssets:
    def test_mana_symbol_drawn_at_right_of_title_bar(self) -> None:
        renderer = CardRenderer(symbols=SymbolCache({'R': solid((255, 0, 0, 255), (100, 100))}))
        image = renderer.render(parse_card(BOLT))
        # single symbol ends at 1864px; its center sits near (1812, 215)
        assert image.getpixel((1812, 215)) == (255, 0, 0, 255)

    def test_missing_symbol_leaves_background(self, renderer) -> None:
        image = renderer.render(parse_card(BOLT))
        assert image.getpixel((1812, 215)) == (26, 26, 26, 255)

    def test_frame_image_covers_canvas(self, tmp_path) -> None:
        (tmp_path / 'standard').mkdir()
        solid((0, 255, 0, 255)).save(tmp_path / 'standard' / 'r.png')
        renderer = CardRenderer(frames_dir=str(tmp_path))

        image = renderer.render(parse_card(BOLT))
        assert image.getpixel((5, 5)) == (0, 255, 0, 255)

    def test_frame_for_other_color_not_used(self, tmp_path) -> None:
        (tmp_path / 'standard').mkdir()
        solid((0, 255, 0, 255)).save(tmp_path / 'standard' / 'g.png')
        renderer = CardRenderer(frames_dir=str(tmp_path))

        image = renderer.render(parse_card(BOLT))
        assert image.getpixel((5, 5)) == (26, 26, 26, 255)

    def test_artwork_fills_art_box(self, renderer) -> None:
        image = renderer.render(parse_card(BOLT), artwork=solid((0, 0, 255, 255), (300, 200)))
        assert image.getpixel((1005, 940)) == (0, 0, 255, 255)

    def test_frame_images_loaded_once(self, tmp_path) -> None:
        (tmp_path / 'standard').mkdir()
        solid((0, 255, 0, 255)).save(tmp_path / 'standard' / 'r.png')
        renderer = CardRenderer(frames_dir=str(tmp_path))

        first = renderer._load_image_cached('standard', 'r.png')
        assert renderer._load_image_cached('standard', 'r.png') is first
        assert renderer._load_image_cached('standard', 'missing.png') is None

    def test_set_symbol_by_rarity(self) -> None:
        symbols = SymbolCache({'set-mythic': solid((255, 128, 0, 255), (40, 40))})
        image = CardRenderer(symbols=symbols).render(parse_card(QUESTING_BEAST))
        # right edge at 1862px, vertically centered at 0.591 of the height
        assert image.getpixel((1820, round(0.591 * 2814))) == (255, 128, 0, 255)

    def test_unfit_text_is_omitted_with_warning(self, renderer, caplog) -> None:
        surface = PillowSurface(200, 200)
        with caplog.at_level(logging.WARNING, logger='crucible.card_renderer'):
            renderer._draw_wrapped(surface, 'far too much text for this box', TextBox(0, 0, 100, 1),
                                   config.RULES_FONT, 20)
        assert 'did not fit' in caplog.text
        assert surface.image.getpixel((50, 0)) == (26, 26, 26, 255)


class TestLoadFontPaths:
    def test_no_directory(self) -> None:
        assert load_font_paths(None) == {}

    def test_only_existing_files_mapped(self, tmp_path, caplog) -> None:
        (tmp_path / 'mplantin.ttf').write_bytes(b'')
        with caplog.at_level(logging.WARNING):
            fonts = load_font_paths(str(tmp_path))
        assert fonts == {config.RULES_FONT: str(tmp_path / 'mplantin.ttf')}
        assert 'beleren-b.ttf' in caplog.text


class TestFromConfig:
    def test_uses_configured_directories(self, tmp_path, monkeypatch) -> None:
        solid((255, 0, 0, 255)).save(tmp_path / 'r.png')
        monkeypatch.setattr(config, 'SYMBOLS_DIR', str(tmp_path))
        monkeypatch.setattr(config, 'FONTS_DIR', None)
        monkeypatch.setattr(config, 'FRAMES_DIR', str(tmp_path))

        renderer = CardRenderer.from_config()
        assert 'R' in renderer.symbols
        assert renderer.fonts == {}
        assert renderer.frames_dir == str(tmp_path)

    def test_without_directories(self, monkeypatch) -> None:
        monkeypatch.setattr(config, 'SYMBOLS_DIR', None)
        monkeypatch.setattr(config, 'FONTS_DIR', None)
        monkeypatch.setattr(config, 'FRAMES_DIR', None)

        renderer = CardRenderer.from_config()
        assert len(renderer.symbols) == 0
        assert renderer.frames_dir is None
