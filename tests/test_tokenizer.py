"""Tests for the tokenizers and the tokenizer registry."""

from __future__ import annotations

import pytest

from bayes_classifier import tokenizer as tokenizer_module
from bayes_classifier.errors import InvalidOptionsError
from bayes_classifier.tokenizer import (
    CharacterTokenizer,
    FunctionTokenizer,
    Tokenizer,
    WordTokenizer,
    available_tokenizers,
    get_tokenizer,
    register_tokenizer,
    resolve_tokenizer,
    tokenizer_name,
)


class LowercaseTokenizer(Tokenizer):
    name = "lowercase"

    def tokenize(self, text: str) -> list[str]:
        return text.lower().split()


@pytest.fixture
def isolated_registry(monkeypatch):
    """Let a test register tokenizers without leaking them into others."""
    monkeypatch.setattr(tokenizer_module, "_REGISTRY", dict(tokenizer_module._REGISTRY))


# ---------------------------------------------------------------------------
# WordTokenizer
# ---------------------------------------------------------------------------

class TestWordTokenizer:
    """Tests for the default word tokenizer."""

    @pytest.fixture
    def tokenizer(self) -> WordTokenizer:
        return WordTokenizer()

    def test_splits_on_whitespace(self, tokenizer):
        assert tokenizer.tokenize("Chinese Beijing Chinese") == ["Chinese", "Beijing", "Chinese"]

    def test_punctuation_becomes_separator(self, tokenizer):
        assert tokenizer.tokenize("amazing, awesome movie!! Yeah!!") == [
            "amazing", "awesome", "movie", "Yeah",
        ]

    def test_preserves_case(self, tokenizer):
        assert tokenizer.tokenize("Tokyo tokyo") == ["Tokyo", "tokyo"]

    def test_keeps_digits_and_underscores(self, tokenizer):
        assert tokenizer.tokenize("snake_case v2") == ["snake_case", "v2"]

    def test_empty_and_blank_text(self, tokenizer):
        assert tokenizer.tokenize("") == []
        assert tokenizer.tokenize("   \n\t ") == []
        assert tokenizer.tokenize("?!...") == []

    def test_leading_and_trailing_blanks_yield_no_tokens(self, tokenizer):
        assert tokenizer.tokenize("  hello world  ") == ["hello", "world"]

    def test_cyrillic_words_stay_whole(self, tokenizer):
        assert tokenizer.tokenize("Надежда за обич еп.36 Тест") == [
            "Надежда", "за", "обич", "еп", "36", "Тест",
        ]

    def test_other_scripts(self, tokenizer):
        assert tokenizer.tokenize("café naïve") == ["café", "naïve"]
        assert tokenizer.tokenize("Ελλάδα, 日本語") == ["Ελλάδα", "日本語"]

    def test_deterministic(self, tokenizer):
        text = "Sweet, this is incredibly, amazing, perfect, great!!"
        assert tokenizer.tokenize(text) == tokenizer.tokenize(text)

    def test_callable(self, tokenizer):
        assert tokenizer("a b") == ["a", "b"]


# ---------------------------------------------------------------------------
# Other tokenizers
# ---------------------------------------------------------------------------

class TestCharacterTokenizer:

    def test_one_token_per_character(self):
        assert CharacterTokenizer().tokenize("abcd") == ["a", "b", "c", "d"]

    def test_whitespace_is_a_token(self):
        assert CharacterTokenizer().tokenize("a b") == ["a", " ", "b"]


class TestFunctionTokenizer:

    def test_wraps_callable(self):
        tok = FunctionTokenizer(lambda text: text.split("-"))
        assert tok.tokenize("a-b-c") == ["a", "b", "c"]

    def test_converts_result_to_list(self):
        tok = FunctionTokenizer(lambda text: tuple(text))
        assert tok.tokenize("ab") == ["a", "b"]

    def test_has_no_name(self):
        tok = FunctionTokenizer(str.split)
        assert tok.name is None
        assert tokenizer_name(tok) is None


# ---------------------------------------------------------------------------
# Registry and resolution
# ---------------------------------------------------------------------------

class TestRegistry:

    def test_builtin_names(self):
        assert available_tokenizers()[:2] == ["words", "characters"]

    def test_get_tokenizer_returns_fresh_instances(self):
        first = get_tokenizer("words")
        second = get_tokenizer("words")
        assert isinstance(first, WordTokenizer)
        assert first is not second

    def test_unknown_name_raises(self):
        with pytest.raises(InvalidOptionsError, match="Unknown tokenizer"):
            get_tokenizer("does-not-exist")

    def test_register_custom(self, isolated_registry):
        register_tokenizer("lowercase", LowercaseTokenizer)
        tok = get_tokenizer("lowercase")
        assert tok.tokenize("Hello World") == ["hello", "world"]
        assert tokenizer_name(tok) == "lowercase"
        assert "lowercase" in available_tokenizers()

    def test_register_duplicate_raises(self, isolated_registry):
        with pytest.raises(ValueError, match="already registered"):
            register_tokenizer("words", WordTokenizer)

    def test_register_empty_name_raises(self, isolated_registry):
        with pytest.raises(ValueError, match="empty"):
            register_tokenizer("", WordTokenizer)

    def test_factory_without_name_gets_registry_name(self, isolated_registry):
        register_tokenizer("dashes", lambda: FunctionTokenizer(lambda t: t.split("-")))
        tok = get_tokenizer("dashes")
        assert tok.name == "dashes"
        assert tokenizer_name(tok) == "dashes"

    def test_unregistered_name_is_not_persistable(self):
        assert tokenizer_name(LowercaseTokenizer()) is None

    def test_subclass_inheriting_builtin_name_is_not_persistable(self):
        class LowerWords(WordTokenizer):
            def tokenize(self, text: str) -> list[str]:
                return super().tokenize(text.lower())

        assert LowerWords().name == "words"
        assert tokenizer_name(LowerWords()) is None
        assert tokenizer_name(WordTokenizer()) == "words"


class TestResolveTokenizer:

    def test_none_is_default(self):
        assert isinstance(resolve_tokenizer(None), WordTokenizer)

    def test_name(self):
        assert isinstance(resolve_tokenizer("characters"), CharacterTokenizer)

    def test_instance_passes_through(self):
        tok = CharacterTokenizer()
        assert resolve_tokenizer(tok) is tok

    def test_callable_is_wrapped(self):
        tok = resolve_tokenizer(lambda text: list(text))
        assert isinstance(tok, FunctionTokenizer)
        assert tok.tokenize("ab") == ["a", "b"]

    @pytest.mark.parametrize("value", [42, 1.5, ["a"], {"name": "words"}])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidOptionsError):
            resolve_tokenizer(value)
