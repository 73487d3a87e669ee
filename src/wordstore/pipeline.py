"""
Read, transform and rewrite a whole token store.

Each run drains the store through a read-only handle, closes it, computes
the new content in memory, then rewrites it through a fresh read-write
handle which is closed again before returning.
"""

from dataclasses import dataclass
from functools import partial
from os import PathLike, fspath
import logging

from ._decorators import measure_time
from ._text import split_tokens
from .backends.base import Backend
from .config import Settings, load_settings
from .factory import resolve_backend
from .store import AccessMode, TokenStore
from .transform import (
    RenderStyle,
    Transform,
    TransformName,
    compact_sorted_by_length,
    compact_with_frequency,
    get_transform,
    sort_by_length_text,
)
from .types import SerializedText

log = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """Outcome of one whole-store transformation."""

    path: str
    transform: str
    tokens_before: int
    tokens_after: int
    text: SerializedText


def _transform_name(transform: Transform | str) -> str:
    if isinstance(transform, str):
        return transform
    if isinstance(transform, partial):
        return transform.func.__name__
    return getattr(transform, "__name__", repr(transform))


def _describe_run(path: str | PathLike[str], transform: Transform | str, **_) -> str:
    return f"transform {_transform_name(transform)} of {fspath(path)}"


@measure_time(_describe_run)
def apply_transform(
    path: str | PathLike[str],
    transform: Transform | TransformName,
    *,
    backend: Backend | str | None = None,
    max_token_length: int | None = None,
    settings: Settings | None = None,
) -> TransformResult:
    """
    Rewrite a store with the result of a transform.

    :param path: Store location.
    :param transform: Registered transform name or a callable taking the
                      token sequence and returning serialized text.
    :param backend: Backend instance or registry name; both passes use the
                    same backend instance.
    :param max_token_length: Token limit for reading.
    :param settings: Settings to use instead of the environment.
    :returns: Token counts before and after plus the written text.
    :raises OpenError: If either pass cannot open the store.
    :raises TransformError: If ``transform`` names no registered transform.
    """
    name = _transform_name(transform)
    fn = get_transform(transform) if isinstance(transform, str) else transform

    if settings is None:
        settings = load_settings()
    impl = resolve_backend(backend, settings)
    path_str = fspath(path)

    # the read handle must be released before the store is reopened for writing
    with TokenStore.open(
        path_str,
        AccessMode.READ_ONLY,
        backend=impl,
        max_token_length=max_token_length,
        settings=settings,
    ) as store:
        tokens = store.tokens()

    text = fn(tokens)

    with TokenStore.open(
        path_str,
        AccessMode.READ_WRITE,
        backend=impl,
        max_token_length=max_token_length,
        settings=settings,
    ) as store:
        store.write_all(text)

    result = TransformResult(
        path=path_str,
        transform=name,
        tokens_before=len(tokens),
        tokens_after=len(split_tokens(text)),
        text=text,
    )
    log.info(
        f"{name} rewrote {path_str}: "
        f"{result.tokens_before} -> {result.tokens_after} tokens"
    )
    return result


def leave_unique_words_with_count(
    path: str | PathLike[str],
    *,
    style: RenderStyle | str = RenderStyle.PAREN,
    merge_counts: bool = False,
    **options,
) -> TransformResult:
    """
    Replace a store with its unique tokens and their counts.

    ``options`` are passed to ``apply_transform``.
    """
    fn = partial(compact_with_frequency, style=style, merge_counts=merge_counts)
    return apply_transform(path, fn, **options)


def sort_words_by_length(
    path: str | PathLike[str], *, unique: bool = False, **options
) -> TransformResult:
    """
    Replace a store with its tokens sorted by length.

    With ``unique`` the tokens are grouped with their counts first and
    equal lengths are ordered lexicographically.
    """
    fn = compact_sorted_by_length if unique else sort_by_length_text
    return apply_transform(path, fn, **options)


__all__ = [
    "TransformResult",
    "apply_transform",
    "leave_unique_words_with_count",
    "sort_words_by_length",
]
