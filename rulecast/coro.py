"""Drive the evaluation coroutine from synchronous entry points.

Rule predicates, custom callbacks and processors may return awaitables. The
engine is written once as coroutines that await such results in order; the
synchronous API steps that coroutine to completion in the calling thread and
refuses to block on anything that is actually pending.
"""

import inspect
import typing

from . import errors as _errors

T = typing.TypeVar("T")


async def resolve(value: typing.Any) -> typing.Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def run_sync(coro: typing.Coroutine[typing.Any, typing.Any, T]) -> T:
    """Run a coroutine that is expected to finish without suspending.

    Args:
        coro: Coroutine produced by the engine

    Returns:
        The coroutine's return value

    Raises:
        AsyncRuleError: If the coroutine suspends on a pending awaitable
    """
    try:
        coro.send(None)
    except StopIteration as stop:
        return typing.cast(T, stop.value)
    coro.close()
    raise _errors.AsyncRuleError(
        "A rule awaited a pending operation; use the async_validate API instead"
    )
