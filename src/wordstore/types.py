"""
Core types for token stores.
"""

type Token = str
type TokenSequence = list[Token]
type SerializedText = str
type Entry = tuple[Token, int]
