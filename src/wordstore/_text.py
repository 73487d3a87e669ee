"""
Whitespace tokenization shared by backends and transforms.
"""

from typing import Final, Iterable

import regex as re

from .types import SerializedText, Token, TokenSequence

# a token is a maximal run of non-whitespace characters
TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"\S+")
SEPARATOR: Final[str] = " "


def split_tokens(text: str) -> TokenSequence:
    """Split text into whitespace-delimited tokens."""
    return TOKEN_PATTERN.findall(text)


def join_tokens(tokens: Iterable[Token]) -> SerializedText:
    """Join tokens with exactly one space and no surrounding whitespace."""
    return SEPARATOR.join(tokens)
