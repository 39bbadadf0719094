import pytest

from crucible.text_processing.tokenizer import Token, join_tokens, parse_mana_symbols, tokenize


class TestTokenize:
    def test_plain_text_is_single_token(self) -> None:
        assert tokenize('Hello world') == [Token('text', 'Hello world')]

    def test_single_symbol(self) -> None:
        assert tokenize('{T}') == [Token('symbol', 'T')]

    def test_text_with_inline_symbols(self) -> None:
        assert tokenize('{T}: Add {C}{C}.') == [
            Token('symbol', 'T'),
            Token('text', ': Add '),
            Token('symbol', 'C'),
            Token('symbol', 'C'),
            Token('text', '.'),
        ]

    def test_hybrid_and_phyrexian_symbols_kept_verbatim(self) -> None:
        assert tokenize('{G/P}{w/u}') == [Token('symbol', 'G/P'), Token('symbol', 'w/u')]

    def test_empty_string(self) -> None:
        assert tokenize('') == []

    def test_unclosed_brace_becomes_trailing_text(self) -> None:
        assert tokenize('some {broken') == [
            Token('text', 'some '),
            Token('text', '{broken'),
        ]

    def test_unclosed_brace_after_symbol(self) -> None:
        assert tokenize('{R} and {G') == [
            Token('symbol', 'R'),
            Token('text', ' and '),
            Token('text', '{G'),
        ]

    def test_text_before_and_after_symbols(self) -> None:
        assert tokenize('Pay {1}{G/P}, {T}, Sacrifice') == [
            Token('text', 'Pay '),
            Token('symbol', '1'),
            Token('symbol', 'G/P'),
            Token('text', ', '),
            Token('symbol', 'T'),
            Token('text', ', Sacrifice'),
        ]

    def test_is_symbol(self) -> None:
        text_token, symbol_token = tokenize('x{T}')
        assert not text_token.is_symbol
        assert symbol_token.is_symbol

    @pytest.mark.parametrize('text', [
        '{T}: Add {C}{C}.',
        'Pay {1}{G/P}, {T}, Sacrifice a creature',
        'No symbols at all',
        '{W}{U}{B}{R}{G}: Untap all attacking creatures.',
        'Trailing {X}',
    ])
    def test_balanced_text_round_trips(self, text: str) -> None:
        assert join_tokens(tokenize(text)) == text

    def test_repeated_calls_are_identical(self) -> None:
        text = 'Flying {2}{U}: Draw a card.'
        assert tokenize(text) == tokenize(text)


class TestParseManaSymbols:
    def test_simple_cost(self) -> None:
        assert parse_mana_symbols('{R}') == ['R']

    def test_multi_symbol_cost(self) -> None:
        assert parse_mana_symbols('{2}{W}{W}') == ['2', 'W', 'W']

    def test_hybrid_cost(self) -> None:
        assert parse_mana_symbols('{3}{G/P}') == ['3', 'G/P']

    def test_empty_cost(self) -> None:
        assert parse_mana_symbols('') == []

    def test_text_without_braces(self) -> None:
        assert parse_mana_symbols('no mana here') == []

    def test_large_cost(self) -> None:
        assert parse_mana_symbols('{5}{U}{R}{G}') == ['5', 'U', 'R', 'G']
