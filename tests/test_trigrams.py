"""Unit tests for the trigram tokenizer."""

from grubprint_api.search.trigrams import BOUNDARY, PAD, normalize, trigrams, word_trigrams


class TestNormalize:
    def test_lowercases(self):
        assert normalize("Cheddar CHEESE") == "cheddar cheese"

    def test_drops_punctuation_without_splitting(self):
        assert normalize("o'brien, raw-ish!") == "obrien rawish"

    def test_lowercases_before_filtering(self):
        # "İ".lower() is "i" plus a combining dot, which is not a letter
        assert normalize("İ") == "i"
        assert trigrams("İSTANBUL") == trigrams("istanbul")

    def test_keeps_digits_and_whitespace(self):
        assert normalize("2% milk\tfat") == "2 milk\tfat"


class TestTrigrams:
    def test_word_grams_are_padded_and_bounded(self):
        assert word_trigrams("pie") == [
            PAD + PAD + "p",
            PAD + "pi",
            "pie",
            "ie" + BOUNDARY,
        ]

    def test_single_character_word(self):
        assert trigrams("a") == {PAD + PAD + "a", PAD + "a" + BOUNDARY}

    def test_two_character_word(self):
        assert trigrams("ab") == {PAD + PAD + "a", PAD + "ab", "ab" + BOUNDARY}

    def test_word_grams_reset_between_words(self):
        grams = trigrams("ab cd")
        assert PAD + PAD + "c" in grams
        assert "b c" not in grams
        assert len(grams) == 6

    def test_returns_set_without_duplicates(self):
        assert trigrams("cheese cheese") == trigrams("cheese")
        assert len(trigrams("cheese")) == 7

    def test_repeated_calls_agree(self):
        assert trigrams("Cheese, cheddar") == trigrams("Cheese, cheddar")

    def test_case_insensitive(self):
        assert trigrams("Cheese") == trigrams("cheese")

    def test_punctuation_insensitive(self):
        assert trigrams("cheese!") == trigrams("cheese")
        assert trigrams("Cheese, cheddar") == trigrams("cheese cheddar")

    def test_empty_string(self):
        assert trigrams("") == frozenset()

    def test_only_punctuation(self):
        assert trigrams("!?,.-") == frozenset()

    def test_whitespace_only(self):
        assert trigrams("   \t ") == frozenset()

    def test_digits_are_grams(self):
        assert trigrams("2") == {PAD + PAD + "2", PAD + "2" + BOUNDARY}
        assert PAD + PAD + "2" in trigrams("2% milk")
