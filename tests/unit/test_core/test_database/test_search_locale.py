"""Tests for locale-aware folding."""

from __future__ import annotations

import pytest

from dynamic_search.core.database.search.locale import (
    TURKISH_FOLDING,
    fold,
    folding_locales,
    is_folding_locale,
    register_folding,
    unregister_folding,
)


@pytest.fixture
def german_folding():
    """Register a temporary German folding table."""
    register_folding("german", {"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})
    yield
    unregister_folding("german")


@pytest.mark.unit
class TestTurkishFolding:
    """Test the built-in Turkish folding table."""

    def test_folds_cicek(self):
        assert fold("Çiçek", "turkish") == "Cicek"

    def test_folds_every_table_entry(self):
        for source, replacement in TURKISH_FOLDING.items():
            assert fold(source, "turkish") == replacement

    def test_table_has_twelve_entries(self):
        assert len(TURKISH_FOLDING) == 12

    def test_locale_lookup_is_case_insensitive(self):
        assert fold("şğı", "Turkish") == "sgi"
        assert fold("şğı", " TURKISH ") == "sgi"

    def test_untouched_characters_pass_through(self):
        assert fold("İstanbul 34!", "turkish") == "Istanbul 34!"

    @pytest.mark.parametrize(
        "text",
        ["Çiçek", "IŞIK ığdır", "Gümüşhane", "plain ascii", "", "ÇÇÇ ççç"],
    )
    def test_folding_is_idempotent(self, text):
        once = fold(text, "turkish")
        assert fold(once, "turkish") == once


@pytest.mark.unit
class TestNonFoldingLocales:
    """Locales without a table leave text unchanged."""

    @pytest.mark.parametrize("locale", ["english", "simple", "french", ""])
    def test_passthrough(self, locale):
        assert fold("Çiçek İğne", locale) == "Çiçek İğne"

    def test_empty_text(self):
        assert fold("", "turkish") == ""


@pytest.mark.unit
class TestFoldingRegistry:
    """Test registering and removing folding tables."""

    def test_turkish_registered_by_default(self):
        assert is_folding_locale("turkish")
        assert "turkish" in folding_locales()

    def test_english_not_registered(self):
        assert not is_folding_locale("english")

    def test_register_new_locale(self, german_folding):
        assert is_folding_locale("German")
        assert fold("Straße öl", "german") == "Strasse oel"
        assert folding_locales() == sorted(folding_locales())

    def test_unregister_locale(self, german_folding):
        unregister_folding("german")

        assert not is_folding_locale("german")
        assert fold("Straße", "german") == "Straße"

    def test_unregister_unknown_locale_is_ignored(self):
        unregister_folding("klingon")

    def test_rejects_blank_locale(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            register_folding("  ", {"a": "b"})

    def test_rejects_multi_character_key(self):
        with pytest.raises(ValueError, match="single characters"):
            register_folding("broken", {"ab": "c"})

    def test_rejects_non_idempotent_table(self):
        with pytest.raises(ValueError, match="folded character"):
            register_folding("broken", {"a": "b", "b": "c"})

        assert not is_folding_locale("broken")
