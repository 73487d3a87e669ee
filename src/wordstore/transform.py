"""
Whole-store transformations over in-memory token sequences.

Every function here is pure: inputs are never mutated and no I/O happens.
All of them accept the empty sequence and then return an empty result.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Callable, Final, Iterable, Literal

import regex as re

from ._text import join_tokens, split_tokens
from .exceptions import TransformError
from .types import Entry, SerializedText, Token, TokenSequence

# "token(count)": the token is everything before the last parenthesised count
ENTRY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?P<token>.+)\((?P<count>[1-9][0-9]*)\)"
)


class RenderStyle(str, Enum):
    """How a frequency entry is rendered."""

    # "cat(2)": one token per entry
    PAREN = "paren"
    # "cat 2": two tokens per entry
    PAIR = "pair"

    @classmethod
    def get(cls, style: "RenderStyle | str") -> "RenderStyle":
        """Get render style by value (case-insensitive)."""
        if isinstance(style, RenderStyle):
            return style
        try:
            return cls(style.lower())
        except ValueError:
            raise TransformError(
                "unknown render style",
                invalid_name=style,
                available=[s.value for s in cls],
            )


@dataclass
class FrequencyTable:
    """
    Occurrence counts paired with first-occurrence order.

    ``order`` is authoritative for iteration; ``counts`` is only a lookup.
    """

    counts: dict[Token, int] = field(default_factory=dict)
    order: list[Token] = field(default_factory=list)

    def add(self, token: Token, n: int = 1) -> None:
        """Count ``n`` more occurrences of ``token``."""
        if token in self.counts:
            self.counts[token] += n
        else:
            self.counts[token] = n
            self.order.append(token)

    def entries(self) -> list[Entry]:
        """Return ``(token, count)`` pairs in first-occurrence order."""
        return [(tok, self.counts[tok]) for tok in self.order]

    def total(self) -> int:
        """Return the number of occurrences counted."""
        return sum(self.counts.values())

    def __len__(self) -> int:
        return len(self.order)


def serialize(tokens: Iterable[Token]) -> SerializedText:
    """Join tokens with single spaces."""
    return join_tokens(tokens)


def deserialize(text: SerializedText) -> TokenSequence:
    """Split serialized text back into tokens on any whitespace."""
    return split_tokens(text)


def parse_entry(token: Token) -> Entry:
    """
    Split a rendered ``token(count)`` entry into its parts.

    Tokens not in that form are a single occurrence of themselves.

    >>> parse_entry("cat(2)")
    ('cat', 2)
    >>> parse_entry("f(x)")
    ('f(x)', 1)
    """
    m = ENTRY_PATTERN.fullmatch(token)
    if m is None:
        return token, 1
    return m.group("token"), int(m.group("count"))


def render_entry(
    token: Token, count: int, style: RenderStyle | str = RenderStyle.PAREN
) -> str:
    """Render one frequency entry in the given style."""
    if RenderStyle.get(style) is RenderStyle.PAIR:
        return f"{token} {count}"
    return f"{token}({count})"


def build_frequency_table(
    tokens: Iterable[Token], *, merge_counts: bool = False
) -> FrequencyTable:
    """
    Count tokens in a single left-to-right scan.

    :param tokens: Token sequence to count.
    :param merge_counts: Treat ``token(n)`` entries as ``n`` occurrences of
                         ``token`` instead of opaque tokens.
    :returns: Frequency table in first-occurrence order.
    """
    table = FrequencyTable()
    for tok in tokens:
        if merge_counts:
            table.add(*parse_entry(tok))
        else:
            table.add(tok)
    return table


def compact_with_frequency(
    tokens: Iterable[Token],
    *,
    style: RenderStyle | str = RenderStyle.PAREN,
    merge_counts: bool = False,
) -> SerializedText:
    """
    Collapse tokens to unique entries annotated with their counts.

    Entries keep first-occurrence order. With the default settings the
    result is not a fixed point: compacting ``"cat(2)"`` again yields
    ``"cat(2)(1)"``. Pass ``merge_counts=True`` to read existing entries
    back, which makes compacting its own output a no-op.

    .. code-block:: python

        compact_with_frequency(["cat", "dog", "cat", "ant"])
        # 'cat(2) dog(1) ant(1)'

    :param tokens: Token sequence, possibly empty.
    :param style: ``"paren"`` renders ``cat(2)``, ``"pair"`` renders ``cat 2``.
    :param merge_counts: Parse ``token(n)`` inputs as ``n`` occurrences.
    :returns: Serialized entries, empty for empty input.
    """
    style = RenderStyle.get(style)
    table = build_frequency_table(tokens, merge_counts=merge_counts)
    return serialize(render_entry(tok, n, style) for tok, n in table.entries())


def stable_sort_by_length(tokens: Iterable[Token]) -> TokenSequence:
    """
    Order tokens by character length, shortest first.

    Duplicates are kept and equal-length tokens keep their input order.
    """
    # sorted() is guaranteed stable
    return sorted(tokens, key=len)


def sort_by_length_text(tokens: Iterable[Token]) -> SerializedText:
    """Serialize ``stable_sort_by_length`` of ``tokens``."""
    return serialize(stable_sort_by_length(tokens))


def unique_sorted_by_length(tokens: Iterable[Token]) -> list[Entry]:
    """Group tokens with their counts, ordered by length then lexicographically."""
    entries = build_frequency_table(tokens).entries()
    return sorted(entries, key=lambda e: (len(e[0]), e[0]))


def compact_sorted_by_length(
    tokens: Iterable[Token], *, style: RenderStyle | str = RenderStyle.PAIR
) -> SerializedText:
    """
    Serialize ``unique_sorted_by_length`` of ``tokens``.

    Defaults to ``token count`` pairs.
    """
    style = RenderStyle.get(style)
    return serialize(
        render_entry(tok, n, style) for tok, n in unique_sorted_by_length(tokens)
    )


# Transform registry
# ===================================================================================

type Transform = Callable[[TokenSequence], SerializedText]

TransformName = Literal["unique", "unique-merge", "sort", "unique-sort"]

_TRANSFORMS: Final[dict[str, Transform]] = {
    "unique": compact_with_frequency,
    "unique-merge": partial(compact_with_frequency, merge_counts=True),
    "sort": sort_by_length_text,
    "unique-sort": compact_sorted_by_length,
}


def list_transforms() -> list[str]:
    """Return available transform names."""
    return list(_TRANSFORMS.keys())


def get_transform(name: TransformName) -> Transform:
    """
    Look up a whole-store transform by name.

    :param name: "unique" compacts with counts, "unique-merge" also merges
                 existing ``token(n)`` entries, "sort" sorts by length and
                 "unique-sort" groups then sorts by length and spelling.
    :raises TransformError: If the name is unknown.
    """
    if name not in _TRANSFORMS:
        raise TransformError(
            "unknown transform name", invalid_name=name, available=list_transforms()
        )
    return _TRANSFORMS[name]


# ===================================================================================


__all__ = [
    "FrequencyTable",
    "RenderStyle",
    "Transform",
    "TransformName",
    "build_frequency_table",
    "compact_sorted_by_length",
    "compact_with_frequency",
    "deserialize",
    "get_transform",
    "list_transforms",
    "parse_entry",
    "render_entry",
    "serialize",
    "sort_by_length_text",
    "stable_sort_by_length",
    "unique_sorted_by_length",
]
