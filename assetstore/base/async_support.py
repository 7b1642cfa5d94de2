"""
Async support for Assetstore.

Provides an ``async_wrap`` decorator that converts any synchronous method
into an awaitable coroutine using :func:`asyncio.to_thread`. Provider
operations are blocking request/response calls; the wrappers let async
callers await them without blocking the event loop.

Usage::

    provider = provider_factory("s3", config)
    data = await provider.aread("docs/report.pdf", private=True)
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")


def async_wrap(
    fn: Callable[..., T],
) -> Callable[..., Coroutine[Any, Any, T]]:
    """Return an async version of *fn* that runs it in a thread.

    The wrapper preserves the original function's signature and docstring.

    Args:
        fn: A synchronous callable to wrap.

    Returns:
        An async callable with the same parameters and return type.
    """

    @functools.wraps(fn)
    async def _wrapper(*args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _wrapper


class AsyncMixin:
    """Mixin that auto-generates ``a<method>`` async variants.

    Subclass this *alongside* a blueprint to gain async versions of every
    public instance method, inherited ones included, that is not already a
    coroutine. Class and static methods are left alone. The async methods
    are created once at class definition time.

    Example::

        class S3StorageProvider(StorageProviderBlueprint, AsyncMixin):
            def read(self, path: str) -> bytes: ...
            # => await self.aread(path) is now available
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        names = {name for klass in cls.__mro__ if klass is not object for name in vars(klass)}
        for name in sorted(names):
            if name.startswith("_"):
                continue
            raw = inspect.getattr_static(cls, name)
            if isinstance(raw, (classmethod, staticmethod, property)):
                continue
            if callable(raw) and not inspect.iscoroutinefunction(raw):
                async_name = f"a{name}"
                if not hasattr(cls, async_name):
                    setattr(cls, async_name, async_wrap(raw))
