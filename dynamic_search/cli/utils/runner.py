"""Run search commands and turn search errors into exit status 1."""

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import wraps
import sys
from typing import Any, TypeVar

from dynamic_search.cli.utils.output import error
from dynamic_search.core.database.search import SearchError

T = TypeVar("T")


@contextmanager
def exits_on_search_error() -> Iterator[None]:
    """Print a SearchError as an error line and exit with status 1.

    Works as a decorator for synchronous commands:

        @search.command()
        @exits_on_search_error()
        def preview(...): ...
    """
    try:
        yield
    except SearchError as exc:
        error(str(exc))
        sys.exit(1)


def coro(f: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """
    Decorator that makes an async command synchronous for Click.

    The event loop runs inside exits_on_search_error(), so cleanup in the
    command's own ``finally`` blocks completes before the exit.

    Usage:
        @search.command()
        @coro
        async def provision(...):
            async with get_engine().connect() as conn:
                ...
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        with exits_on_search_error():
            return asyncio.run(f(*args, **kwargs))

    return wrapper
