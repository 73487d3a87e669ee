"""Timing decorator for whole-store operations."""

import time
import functools
import logging
from typing import Callable

log = logging.getLogger(__name__)


def measure_time(describe: Callable[..., str]) -> Callable:
    """
    Log how long each call of the decorated operation takes.

    :param describe: Called with the operation's arguments to label the log
                     line, e.g. with the transform and store being rewritten.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            label = describe(*args, **kwargs)
            start = time.perf_counter()
            outcome = "failed"
            try:
                result = func(*args, **kwargs)
                outcome = "completed"
                return result
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                log.info(f"{label} {outcome} in {elapsed_ms:.2f} ms")

        return wrapper

    return decorator
