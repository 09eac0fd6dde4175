"""
Declarative batching for functions and methods.

    @batch_in_clause('ids', chunk_size=500)
    def find_names(cn, ids):
        sql, params = expand_in_clause('select name from users where id in ?', ids)
        return [row[0] for row in cn.execute(sql, params)]

Calling `find_names(cn, range(2000))` runs the query four times and returns a
tuple of all names in input order.
"""
import inspect
import logging
from collections.abc import Callable, Sequence
from functools import wraps
from typing import Any

from dbbatch.binding import bindings_for
from dbbatch.dispatch import BatchDispatcher
from dbbatch.options import DEFAULT_CHUNK_SIZE, BatchOptions

logger = logging.getLogger(__name__)

__all__ = ['batch_in_clause']


def batch_in_clause(parameter: str, chunk_size: int = DEFAULT_CHUNK_SIZE,
                    combine: Callable[[list[Any]], Any] | None = None):
    """Split the collection passed as `parameter` into chunks of at most
    `chunk_size` values and call the function once per chunk.

    Options and the parameter name are checked when the decorator is applied;
    `ConfigurationError` and `ParameterNotFound` are raised at that point.

    :param parameter: Declared name or `Param` alias of the batched argument.
    :param chunk_size: Maximum values per call (default: 1000).
    :param combine: Combiner for per-chunk results (default: flatten_results).
    """
    options = BatchOptions(parameter=parameter, chunk_size=chunk_size, combine=combine)

    def decorator(func):
        signature = inspect.signature(func)
        dispatcher = BatchDispatcher(options, bindings_for(func))
        names = list(signature.parameters)
        logger.debug(f'Registered {func.__qualname__} for batching on {parameter}'
                     f' (chunk_size={chunk_size})')

        def describe(args, kwargs) -> list[Any]:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            return [bound.arguments[name] for name in names]

        def rebuild(call: Sequence[Any]) -> inspect.BoundArguments:
            return inspect.BoundArguments(signature, dict(zip(names, call)))

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                async def invoke(call):
                    bound = rebuild(call)
                    return await func(*bound.args, **bound.kwargs)
                return await dispatcher.dispatch_async(describe(args, kwargs), invoke)

            async_wrapper.batch_options = options
            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            def invoke(call):
                bound = rebuild(call)
                return func(*bound.args, **bound.kwargs)
            return dispatcher.dispatch(describe(args, kwargs), invoke)

        wrapper.batch_options = options
        return wrapper

    return decorator
