"""Tests for fhevm_hub.kernel.text."""

from fhevm_hub.kernel.text import extract_h1, lower_camel, title_case, to_kebab_case, unique


class TestToKebabCase:
    """Slug normalisation."""

    def test_acronym_followed_by_word(self):
        """An acronym prefix splits from the following word."""
        assert to_kebab_case("FHECounter") == "fhe-counter"

    def test_camel_case(self):
        assert to_kebab_case("IdentityRegistry") == "identity-registry"

    def test_underscores_become_dashes(self):
        assert to_kebab_case("access_control") == "access-control"

    def test_digits_before_upper(self):
        assert to_kebab_case("ERC7984Token") == "erc7984-token"

    def test_already_kebab(self):
        assert to_kebab_case("access-control") == "access-control"

    def test_whitespace_becomes_one_dash(self):
        assert to_kebab_case("Access Control") == "access-control"
        assert to_kebab_case(" user \t decryption ") == "user-decryption"

    def test_mixed_separators_collapse(self):
        assert to_kebab_case("access__control- list") == "access-control-list"


class TestTitleCase:
    def test_dashes_and_underscores(self):
        assert title_case("access-control") == "Access Control"
        assert title_case("confidential_tokens") == "Confidential Tokens"

    def test_preserves_inner_capitals(self):
        """Only the first letter of each word changes."""
        assert title_case("fhEVM-basics") == "FhEVM Basics"

    def test_empty(self):
        assert title_case("") == ""


def test_lower_camel():
    assert lower_camel("IdentityRegistry") == "identityRegistry"


def test_extract_h1_first_level_one_heading():
    content = "intro\n## Not this\n# The Title \n# Second"
    assert extract_h1(content) == "The Title"


def test_extract_h1_missing():
    assert extract_h1("## Only level two") is None


def test_unique_keeps_first_seen_order():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
