"""Tests for the dice formula tokenizer."""

from __future__ import annotations

import pytest

from rpg_dice.core.exceptions import DiceParseError
from rpg_dice.engine.tokenizer import TokenKind, check_balanced, tokenize


def kinds(expression: str) -> list[TokenKind]:
    return [token.kind for token in tokenize(expression)]


class TestTokenize:
    """Tests for tokenize."""

    def test_dice_with_manipulation_and_modifier(self) -> None:
        """Test a die, a drop, and a modifier tokenize in order."""
        assert kinds("4d6dl1+3") == [TokenKind.DICE, TokenKind.DROP_KEEP, TokenKind.MOD]

    def test_dice_groups(self) -> None:
        """Test dice tokens capture sign, fixed rolls, count, and size."""
        token = tokenize("-(3,5)2d6")[0]

        assert token.kind is TokenKind.DICE
        assert token.groups == ("-", "3,5", "2", "6")

    def test_die_without_count(self) -> None:
        """Test a bare 'd20' is a die."""
        token = tokenize("d20")[0]

        assert token.kind is TokenKind.DICE
        assert token.groups[2] is None
        assert token.groups[3] == "20"

    def test_chained_manipulations(self) -> None:
        """Test manipulations may follow one another in any order."""
        assert kinds("4d6xdl1") == [TokenKind.DICE, TokenKind.EXPLODE, TokenKind.DROP_KEEP]
        assert kinds("4d6nsdl1") == [TokenKind.DICE, TokenKind.NO_SORT, TokenKind.DROP_KEEP]
        assert kinds("2d10ht7x") == [TokenKind.DICE, TokenKind.THRESHOLD, TokenKind.EXPLODE]

    def test_explode_comparator(self) -> None:
        """Test an explode token captures its comparator and value."""
        token = tokenize("3d6x>=5")[1]

        assert token.kind is TokenKind.EXPLODE
        assert token.groups == (">=", "5")

    def test_spaced_explode(self) -> None:
        """Test an explode token may be spaced from its value."""
        tokens = tokenize("1d6x 5 fire")

        assert [token.kind for token in tokens] == [
            TokenKind.DICE,
            TokenKind.EXPLODE,
            TokenKind.DESCRIPTION,
        ]
        assert tokens[1].groups == (None, "5")

    def test_modifier_against_test_word(self) -> None:
        """Test a modifier ending in a test word is still a modifier."""
        tokens = tokenize("2d6+3dc15")

        assert [token.kind for token in tokens] == [TokenKind.DICE, TokenKind.MOD, TokenKind.TEST]
        assert tokens[1].groups == ("+", "3")
        assert tokens[2].groups == ("dc", None, "15")

    def test_modifier_before_die_is_not_a_modifier(self) -> None:
        """Test a signed count starts a die rather than a modifier."""
        assert kinds("1d20+3d6") == [TokenKind.DICE, TokenKind.DICE]

    def test_lt_after_die_is_threshold(self) -> None:
        """Test 'lt' directly after a die is a low threshold."""
        assert kinds("2d6lt3") == [TokenKind.DICE, TokenKind.THRESHOLD]

    def test_lt_after_modifier_is_test(self) -> None:
        """Test 'lt' away from a die is a less-than test."""
        tokens = tokenize("1d20+2 lt 10")

        assert [token.kind for token in tokens] == [TokenKind.DICE, TokenKind.MOD, TokenKind.TEST]
        assert tokens[2].groups == ("lt", None, "10")

    def test_symbol_test(self) -> None:
        """Test symbolic comparators tokenize as tests."""
        token = tokenize("1d20 >= 15")[1]

        assert token.kind is TokenKind.TEST
        assert token.groups == (None, ">=", "15")

    def test_hidden_test_target(self) -> None:
        """Test a spoiler-wrapped target is captured whole."""
        token = tokenize("1d20 vs ||15||")[1]

        assert token.groups[2] == "||15||"

    def test_math_modifiers(self) -> None:
        """Test modifiers may be groups or function calls."""
        group = tokenize("1d20+(2*3)")[1]
        call = tokenize("1d20+floor(5/2)")[1]

        assert group.kind is TokenKind.MOD
        assert group.groups == ("+", "(2*3)")
        assert call.groups == ("+", "floor(5/2)")

    def test_leading_bare_number(self) -> None:
        """Test an unsigned number is accepted as the first token."""
        tokens = tokenize("10+1d6")

        assert tokens[0].kind is TokenKind.MOD
        assert tokens[0].groups == (None, "10")
        assert tokens[1].kind is TokenKind.DICE

    def test_description_merges_words(self) -> None:
        """Test free text merges into one description token."""
        tokens = tokenize("1d20 fire damage")

        assert [token.kind for token in tokens] == [TokenKind.DICE, TokenKind.DESCRIPTION]
        assert tokens[1].text == "fire damage"

    def test_words_that_start_like_manipulations(self) -> None:
        """Test words are not mistaken for manipulations."""
        assert kinds("1d8 xp") == [TokenKind.DICE, TokenKind.DESCRIPTION]
        assert kinds("1d6 khopesh") == [TokenKind.DICE, TokenKind.DESCRIPTION]
        assert kinds("2d6 nsfw") == [TokenKind.DICE, TokenKind.DESCRIPTION]

    def test_quoted_description(self) -> None:
        """Test quoted text is a single quote token."""
        tokens = tokenize('1d20 "Sneak 2d6 Attack"')

        assert tokens[1].kind is TokenKind.QUOTE
        assert tokens[1].groups == ("Sneak 2d6 Attack",)

    def test_token_offsets(self) -> None:
        """Test tokens record their source offsets."""
        tokens = tokenize("1d20 + 5")

        assert tokens[0].offset == 0
        assert tokens[1].offset == 5
        assert tokens[1].end == 8


class TestCheckBalanced:
    """Tests for delimiter checks."""

    def test_balanced(self) -> None:
        """Test balanced input passes."""
        check_balanced('(3,5)2d6+(1+2) "a (quoted" [x]')

    def test_unterminated_group(self) -> None:
        """Test an open parenthesis is rejected."""
        with pytest.raises(DiceParseError) as exc_info:
            tokenize("(3,5 2d6")

        assert exc_info.value.reason == "unterminated_group"
        assert exc_info.value.offset == 0

    def test_unmatched_closer(self) -> None:
        """Test a stray closing parenthesis is rejected."""
        with pytest.raises(DiceParseError) as exc_info:
            tokenize("2d6)")

        assert exc_info.value.reason == "unmatched_delimiter"
        assert exc_info.value.offset == 3

    def test_unterminated_quote(self) -> None:
        """Test an open quote is rejected."""
        with pytest.raises(DiceParseError) as exc_info:
            tokenize('1d20 "attack')

        assert exc_info.value.reason == "unterminated_quote"
        assert exc_info.value.offset == 5
