"""Benchmark whole-store transformations on synthetic word stores.

Outputs one row per transform:
  Transform | Backend | Words In | Words Out | Time | Throughput
"""

import argparse
import tempfile
import time
from pathlib import Path

from wordstore import MemoryBackend, apply_transform, list_transforms


def make_text(target_mb: float) -> str:
    """Build deterministic synthetic text close to target size."""
    target_bytes = int(target_mb * 1024 * 1024)
    seed = (
        "The wormhole shimmered above Titan while engines hummed in sync. "
        "Captain Rao logged coordinates and the archive AI cross-checked stellar drift. "
        "Quantum relays pulsed, translating static into maps for the next jump. "
    )
    repeat = max(1, target_bytes // len(seed.encode("utf-8")) + 1)
    # seed is ASCII, so characters and bytes line up
    return (seed * repeat)[:target_bytes]


def run_once(
    name: str, backend: str, text: str, workdir: Path
) -> tuple[int, int, float]:
    """Apply transform `name` to a fresh store and return (words in, words out, secs)."""
    if backend == "memory":
        path = "bench"
        impl = MemoryBackend({path: text})
    else:
        path = workdir / f"{name}.txt"
        path.write_text(text, encoding="utf-8")
        impl = "text"

    start = time.perf_counter()
    result = apply_transform(path, name, backend=impl, max_token_length=1024)
    elapsed = time.perf_counter() - start
    return result.tokens_before, result.tokens_after, elapsed


def main() -> None:
    """Run every registered transform against each backend and print a table."""
    parser = argparse.ArgumentParser(
        description="Benchmark wordstore transformations."
    )
    parser.add_argument(
        "--size-mb",
        type=float,
        default=4.0,
        help="Size of the synthetic store in MB (default: 4).",
    )
    parser.add_argument(
        "--backend",
        choices=["memory", "text", "all"],
        default="all",
        help="Backend to benchmark (default: all).",
    )
    args = parser.parse_args()

    text = make_text(args.size_mb)
    backends = ["memory", "text"] if args.backend == "all" else [args.backend]
    print(f"Synthetic store: {len(text.encode('utf-8')) / (1024 * 1024):.2f} MB")

    rows = []
    with tempfile.TemporaryDirectory() as tmp:
        for backend in backends:
            for name in list_transforms():
                words_in, words_out, secs = run_once(name, backend, text, Path(tmp))
                rows.append((name, backend, words_in, words_out, secs))

    print()
    print(
        f"| {'Transform':12} | {'Backend':7} | {'Words In':10} | {'Words Out':10} "
        f"| {'Time':10} | {'Throughput':18} |"
    )
    print(
        f"| {'-' * 12} | {'-' * 7} | {'-' * 10} | {'-' * 10} "
        f"| {'-' * 10} | {'-' * 18} |"
    )
    for name, backend, words_in, words_out, secs in rows:
        throughput = words_in / secs / 1_000_000 if secs > 0 else float("inf")
        print(
            f"| {name:12} | {backend:7} | {words_in:10,} | {words_out:10,} "
            f"| {f'{secs * 1000:.1f} ms':10} | {f'{throughput:.2f}M words/sec':18} |"
        )
    print()


if __name__ == "__main__":
    main()
