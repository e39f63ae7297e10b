"""Tests for keyword compilation."""

from __future__ import annotations

import pytest

from dynamic_search.core.database.search import (
    CompiledSearch,
    EmptyKeyword,
    InvalidInput,
    InvalidKeyword,
    compile_search,
    compile_ts_query,
)


@pytest.mark.unit
class TestCompileTsQuery:
    """Test prefix tsquery compilation."""

    def test_two_words(self):
        assert compile_ts_query("quick fox") == "quick:* & fox:*"

    def test_single_word(self):
        assert compile_ts_query("fox") == "fox:*"

    def test_collapses_whitespace(self):
        assert compile_ts_query("  quick \t\n fox  ") == "quick:* & fox:*"

    @pytest.mark.parametrize("keyword", ["", "   ", "\t\n"])
    def test_blank_input_gives_empty_string(self, keyword):
        assert compile_ts_query(keyword) == ""

    @pytest.mark.parametrize("count", [1, 2, 3, 7])
    def test_token_and_operator_counts(self, count):
        keyword = " ".join(f"word{i}" for i in range(count))

        expression = compile_ts_query(keyword)

        assert expression.count(":*") == count
        assert expression.count(" & ") == count - 1

    def test_keeps_token_case(self):
        assert compile_ts_query("Çiçek") == "Çiçek:*"

    def test_strips_operator_characters(self):
        assert compile_ts_query("fox&") == "fox:*"
        assert compile_ts_query("a | b") == "a:* & b:*"
        assert compile_ts_query("!(x):*") == "x:*"
        assert compile_ts_query("o'neil") == "oneil:*"
        assert compile_ts_query("<->back\\slash") == "-backslash:*"


@pytest.mark.unit
class TestCompileSearch:
    """Test compiling both parameter values."""

    def test_english_keyword(self):
        compiled = compile_search("quick fox", "english")

        assert compiled == CompiledSearch("quick:* & fox:*", "quick fox")

    def test_turkish_keyword_folds_only_normalized_value(self):
        compiled = compile_search("Çiçek", "turkish")

        assert compiled.ts_query_expression == "Çiçek:*"
        assert compiled.normalized_keyword == "cicek"

    def test_english_keeps_diacritics(self):
        compiled = compile_search("Çiçek", "english")

        assert compiled.normalized_keyword == "çiçek"

    def test_trims_and_lowercases(self):
        compiled = compile_search("  Quick Fox  ")

        assert compiled.ts_query_expression == "Quick:* & Fox:*"
        assert compiled.normalized_keyword == "quick fox"

    @pytest.mark.parametrize("keyword", ["", "   ", None])
    def test_blank_keyword_raises(self, keyword):
        with pytest.raises(EmptyKeyword):
            compile_search(keyword)

    def test_operator_only_keyword_raises(self):
        with pytest.raises(InvalidKeyword) as exc_info:
            compile_search("&& ||")

        assert exc_info.value.details["keyword"] == "&& ||"

    def test_max_length_enforced(self):
        with pytest.raises(InvalidKeyword, match="maximum length of 5"):
            compile_search("abcdefg", max_length=5)

    def test_max_length_counts_trimmed_keyword(self):
        compiled = compile_search("   abcde   ", max_length=5)

        assert compiled.ts_query_expression == "abcde:*"

    def test_errors_are_invalid_input(self):
        assert issubclass(EmptyKeyword, InvalidInput)
        assert issubclass(InvalidKeyword, InvalidInput)
