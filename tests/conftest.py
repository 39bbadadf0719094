import pytest

from crucible.card_renderer import CardRenderer


class FixedWidthMeasurer:
    """Every character is half the font size wide, whatever the font"""

    def __init__(self):
        self.calls = []

    def measure_text(self, text, font, size):
        self.calls.append((text, font, size))
        return len(text) * size * 0.5


@pytest.fixture
def measurer():
    return FixedWidthMeasurer()


@pytest.fixture(scope='module')
def renderer():
    return CardRenderer()
