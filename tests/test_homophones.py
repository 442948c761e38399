"""
Tests for the homophone table.
"""

from homonyms.core.homophones import (
    CURATED_GROUPS,
    HOMOPHONES,
    all_words,
    build_index,
    get_homophones,
    has_word,
    is_single_letter,
)


class TestHomophones:
    def test_known_word(self):
        assert get_homophones("there") == ["their", "they're"]

    def test_case_and_whitespace_insensitive(self):
        assert get_homophones(" Bear ") == ["bare"]

    def test_unknown_word(self):
        assert get_homophones("xyzzy") == []
        assert not has_word("xyzzy")

    def test_never_lists_itself(self):
        for word, others in HOMOPHONES.items():
            assert word not in others

    def test_symmetric(self):
        for word, others in HOMOPHONES.items():
            for other in others:
                assert word in HOMOPHONES[other], f"{other} does not list {word}"

    def test_word_in_two_groups(self):
        assert set(get_homophones("read")) == {"reed", "red"}
        assert get_homophones("reed") == ["read"]

    def test_returns_a_copy(self):
        get_homophones("bear").append("bier")
        assert get_homophones("bear") == ["bare"]

    def test_single_letters(self):
        assert is_single_letter("C")
        assert not is_single_letter("sea")
        assert set(get_homophones("c")) == {"sea", "see"}

    def test_all_words_sorted(self):
        words = all_words()
        assert words == sorted(words)
        assert "bear" in words


class TestBuildIndex:
    def test_no_duplicates(self):
        index = build_index([("to", "too", "two"), ("to", "two")])
        assert index["to"] == ["too", "two"]
        assert index["two"] == ["to", "too"]

    def test_curated_groups_have_two_words(self):
        assert all(len(group) >= 2 for group in CURATED_GROUPS)
