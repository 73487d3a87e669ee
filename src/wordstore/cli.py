"""Command-line interface for inspecting and rewriting token stores."""

import argparse
import logging
import sys

from ._sanitise import render_token
from .config import Settings, load_settings
from .exceptions import WordStoreError
from .factory import get_backend, list_backends
from .pipeline import TransformResult
from .session import Session
from .store import AccessMode
from .transform import RenderStyle

# how many tokens the transform commands echo back
PREVIEW: int = 10
# longest token rendered before it is cut
DISPLAY_WIDTH: int = 80

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``wordstore`` command."""
    parser = argparse.ArgumentParser(
        prog="wordstore",
        description="Inspect and rewrite whitespace-delimited word stores.",
    )
    parser.add_argument(
        "--backend",
        choices=list_backends(),
        default=None,
        help="Storage backend (default: $WORDSTORE_BACKEND or text).",
    )
    parser.add_argument(
        "--library",
        default=None,
        help="Shared library path for the native backend.",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="File encoding (default: $WORDSTORE_ENCODING or utf-8).",
    )
    parser.add_argument(
        "--max-token-length",
        type=int,
        default=None,
        help="Longest token accepted when reading (default: 254).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $WORDSTORE_LOG_LEVEL or WARNING).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_count = sub.add_parser("count", help="Print the number of words.")
    p_count.add_argument("path")

    p_words = sub.add_parser("words", help="List the words in order.")
    p_words.add_argument("path")
    p_words.add_argument(
        "--limit", type=int, default=None, help="Only list the first N words."
    )

    p_unique = sub.add_parser(
        "unique", help="Leave only unique words with their repetition counts."
    )
    p_unique.add_argument("path")
    p_unique.add_argument(
        "--style",
        choices=[s.value for s in RenderStyle],
        default=RenderStyle.PAREN.value,
        help="Render entries as word(count) or as 'word count' pairs.",
    )
    p_unique.add_argument(
        "--merge",
        action="store_true",
        help="Read existing word(count) entries back as counts.",
    )

    p_sort = sub.add_parser("sort", help="Sort words by length, shortest first.")
    p_sort.add_argument("path")
    p_sort.add_argument(
        "--unique",
        action="store_true",
        help="Group duplicates with counts, then sort by length and spelling.",
    )

    return parser


def _print_tokens(tokens: list[str], start: int = 1, lengths: bool = False) -> None:
    for i, tok in enumerate(tokens, start=start):
        shown = render_token(tok, DISPLAY_WIDTH)
        if lengths:
            print(f"  {i}. '{shown}' (length: {len(tok)})")
        else:
            print(f"  {i}. {shown}")


def _print_result(result: TransformResult) -> None:
    print(f"Original word count: {result.tokens_before}")
    print(f"New word count: {result.tokens_after}")


def _cmd_count(session: Session, args: argparse.Namespace) -> None:
    session.open(args.path, AccessMode.READ_ONLY)
    print(session.count())


def _cmd_words(session: Session, args: argparse.Namespace) -> None:
    session.open(args.path, AccessMode.READ_ONLY)
    _print_tokens(session.words(args.limit))


def _cmd_unique(session: Session, args: argparse.Namespace) -> None:
    session.open(args.path, AccessMode.READ_ONLY)
    result = session.unique(style=args.style, merge_counts=args.merge)
    _print_result(result)

    n = session.count()
    if n > 0:
        fmt = "word(count)" if args.style == RenderStyle.PAREN.value else "word count"
        print(f"New content (format: {fmt}):")
        _print_tokens(session.words(PREVIEW))
        if n > PREVIEW:
            print(f"  ... and {n - PREVIEW} more")


def _cmd_sort(session: Session, args: argparse.Namespace) -> None:
    session.open(args.path, AccessMode.READ_ONLY)
    result = session.sort(unique=args.unique)
    _print_result(result)

    tokens = session.words()
    if tokens:
        print(f"First {min(PREVIEW, len(tokens))} shortest words:")
        _print_tokens(tokens[:PREVIEW], lengths=True)
        if len(tokens) > PREVIEW:
            start = max(len(tokens) - PREVIEW, PREVIEW)
            print(f"Last {len(tokens) - start} longest words:")
            _print_tokens(tokens[start:], start=start + 1, lengths=True)


_COMMANDS = {
    "count": _cmd_count,
    "words": _cmd_words,
    "unique": _cmd_unique,
    "sort": _cmd_sort,
}


def _make_session(settings: Settings, args: argparse.Namespace) -> Session:
    if args.library is not None:
        backend = get_backend("native", library=args.library, encoding=settings.encoding)
        return Session(backend=backend, settings=settings)
    return Session(settings=settings)


def main(argv: list[str] | None = None) -> int:
    """
    Run the ``wordstore`` command.

    :param argv: Arguments without the program name; defaults to ``sys.argv``.
    :returns: Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings().with_overrides(
            backend=args.backend,
            encoding=args.encoding,
            max_token_length=args.max_token_length,
            log_level=args.log_level,
        )
    except WordStoreError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        with _make_session(settings, args) as session:
            _COMMANDS[args.command](session, args)
    except WordStoreError as e:
        log.debug("command failed", exc_info=True)
        print(f"error: {args.command}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
