"""Tokenizers that turn raw text into the tokens the classifier counts.

A tokenizer is any deterministic mapping from a string to a list of token
strings. The classifier never inspects tokens beyond using them as dict
keys, so the same input must always produce the same output or learned
counts stop lining up with what inference sees.

Named tokenizers live in a small registry so a serialized model can say
*which* tokenizer it was trained with and get it back on load. Plain
callables are accepted too, but they have no name and have to be passed
again when a snapshot is restored.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Optional

from .errors import InvalidOptionsError

DEFAULT_TOKENIZER = "words"

# Anything that is neither a (Unicode) word character nor whitespace.
_NON_WORD_RE = re.compile(r"[^\w\s]")


class Tokenizer(ABC):
    """Abstract base class for tokenizers.

    Subclasses set ``name`` when they are registered so that classifier
    options can refer to them by that name.
    """

    name: Optional[str] = None

    @abstractmethod
    def tokenize(self, text: str) -> list[str]:
        """Split ``text`` into an ordered list of tokens."""
        ...

    def __call__(self, text: str) -> list[str]:
        return self.tokenize(text)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class WordTokenizer(Tokenizer):
    """Default tokenizer: punctuation becomes whitespace, then split.

    Case is preserved. ``\\w`` is Unicode-aware, so Cyrillic, Greek, CJK and
    accented Latin words survive intact while ``"еп.36"`` becomes
    ``["еп", "36"]``.
    """

    name = "words"

    def tokenize(self, text: str) -> list[str]:
        return _NON_WORD_RE.sub(" ", text).split()


class CharacterTokenizer(Tokenizer):
    """One token per character, whitespace included."""

    name = "characters"

    def tokenize(self, text: str) -> list[str]:
        return list(text)


class FunctionTokenizer(Tokenizer):
    """Adapter for a caller-supplied ``text -> tokens`` function."""

    def __init__(self, func: Callable[[str], Sequence[str]]) -> None:
        self.func = func

    def tokenize(self, text: str) -> list[str]:
        return list(self.func(text))

    def __repr__(self) -> str:
        return f"FunctionTokenizer({self.func!r})"


_REGISTRY: dict[str, Callable[[], Tokenizer]] = {
    WordTokenizer.name: WordTokenizer,
    CharacterTokenizer.name: CharacterTokenizer,
}


def register_tokenizer(name: str, factory: Callable[[], Tokenizer]) -> None:
    """Make a tokenizer available by name to options and snapshots.

    Args:
        name: Registry key stored in serialized options.
        factory: Zero-argument callable returning a fresh tokenizer.

    Raises:
        ValueError: If ``name`` is empty or already registered.
    """
    if not name:
        raise ValueError("Tokenizer name cannot be empty")
    if name in _REGISTRY:
        raise ValueError(f"Tokenizer '{name}' is already registered.")
    _REGISTRY[name] = factory


def available_tokenizers() -> list[str]:
    """Names of every registered tokenizer, in registration order."""
    return list(_REGISTRY)


def get_tokenizer(name: str) -> Tokenizer:
    """Instantiate a registered tokenizer.

    Raises:
        InvalidOptionsError: If no tokenizer is registered under ``name``.
    """
    try:
        factory = _REGISTRY[name]
    except KeyError as exc:
        raise InvalidOptionsError(
            f"Unknown tokenizer '{name}'. Available: {', '.join(_REGISTRY)}"
        ) from exc
    tokenizer = factory()
    if tokenizer.name is None:
        tokenizer.name = name
    return tokenizer


def resolve_tokenizer(value: object) -> Tokenizer:
    """Turn an options ``tokenizer`` value into a :class:`Tokenizer`.

    Accepts ``None`` (the default tokenizer), a registered name, a
    :class:`Tokenizer` instance, or any callable taking a string.

    Raises:
        InvalidOptionsError: For any other value.
    """
    if value is None:
        return get_tokenizer(DEFAULT_TOKENIZER)
    if isinstance(value, str):
        return get_tokenizer(value)
    if isinstance(value, Tokenizer):
        return value
    if callable(value):
        return FunctionTokenizer(value)
    raise InvalidOptionsError(
        f"Invalid tokenizer {value!r}: expected a tokenizer name, "
        "a Tokenizer, or a callable."
    )


def tokenizer_name(tokenizer: Tokenizer) -> Optional[str]:
    """Registry name that recreates ``tokenizer``, or ``None`` if there is none.

    The registered factory has to build the same type: a subclass that
    inherits ``name`` but tokenizes differently is not recreatable.
    """
    name = tokenizer.name
    if name is None or name not in _REGISTRY:
        return None
    if type(_REGISTRY[name]()) is not type(tokenizer):
        return None
    return name


__all__ = [
    "DEFAULT_TOKENIZER",
    "CharacterTokenizer",
    "FunctionTokenizer",
    "Tokenizer",
    "WordTokenizer",
    "available_tokenizers",
    "get_tokenizer",
    "register_tokenizer",
    "resolve_tokenizer",
    "tokenizer_name",
]
