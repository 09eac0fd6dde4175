"""
Batch dispatch: split an oversized collection argument into chunks, invoke the
underlying operation once per chunk and combine the results.

The dispatcher never knows what the operation does. Callers supply an
`invoke` callable taking the full positional argument list.

    dispatcher = BatchDispatcher({'parameter': 'ids', 'chunk_size': 500},
                                 ParameterBinding(['cn', 'ids']))
    rows = dispatcher.dispatch([cn, ids], lambda call: find_rows(*call))

Chunks are always invoked sequentially in the order of the original
collection, so the combined result preserves input order.
"""
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from dbbatch.binding import ParameterBinding
from dbbatch.exceptions import InvalidArgument
from dbbatch.options import BatchOptions, is_collection
from dbbatch.partition import Partition, partition

logger = logging.getLogger(__name__)

__all__ = ['BatchDispatcher', 'dispatch', 'dispatch_async']

Invoke = Callable[[Sequence[Any]], Any]
AsyncInvoke = Callable[[Sequence[Any]], Awaitable[Any]]


class BatchDispatcher:
    """Dispatcher for one operation.

    Options are validated and the target parameter resolved on construction,
    so a dispatcher built when an operation is registered reports
    configuration errors before the operation is ever called.
    """

    def __init__(self, options: BatchOptions | Mapping[str, Any],
                 bindings: ParameterBinding):
        self.options = BatchOptions.from_value(options)
        self.options.validate()
        self.bindings = bindings
        self.index = bindings.resolve(self.options.parameter)

    @property
    def operation(self) -> str:
        return self.bindings.operation or '<operation>'

    def plan(self, call: Sequence[Any]) -> Partition | None:
        """Partition of the target argument, or None when no split is needed.
        """
        if self.index >= len(call):
            raise InvalidArgument(
                f"Parameter '{self.options.parameter}' is at position {self.index}"
                f' but {self.operation}() was called with {len(call)} arguments')
        value = call[self.index]
        if not is_collection(value) or len(value) <= self.options.chunk_size:
            return None
        if isinstance(value, deque) or not isinstance(value, Sequence):
            value = list(value)
        return partition(value, self.options.chunk_size)

    def _log_split(self, call: Sequence[Any], chunks: Partition) -> None:
        logger.debug(f'Splitting {len(call[self.index])} values of {self.options.parameter}'
                     f' into {len(chunks)} chunks for {self.operation}()')

    def _chunk_call(self, call: Sequence[Any], chunk: Any) -> list[Any]:
        args = list(call)
        args[self.index] = chunk
        return args

    def dispatch(self, call: Sequence[Any], invoke: Invoke) -> Any:
        """Invoke the operation, once or once per chunk.

        The result of an unsplit call is returned unchanged. A split call
        returns `options.combine` applied to the per-chunk results. The first
        error raised by `invoke` propagates and no further chunks run.
        """
        chunks = self.plan(call)
        if chunks is None:
            return invoke(call)
        self._log_split(call, chunks)

        results = []
        for i, chunk in enumerate(chunks):
            logger.debug(f'Invoking {self.operation}() for chunk {i + 1}/{len(chunks)}')
            results.append(invoke(self._chunk_call(call, chunk)))
        return self.options.combine(results)

    async def dispatch_async(self, call: Sequence[Any], invoke: AsyncInvoke) -> Any:
        """Awaitable variant of `dispatch`.

        Each chunk is awaited before the next one starts. Cancelling the
        dispatch cancels the in-flight chunk and skips the rest.
        """
        chunks = self.plan(call)
        if chunks is None:
            return await invoke(call)
        self._log_split(call, chunks)

        results = []
        for i, chunk in enumerate(chunks):
            logger.debug(f'Awaiting {self.operation}() for chunk {i + 1}/{len(chunks)}')
            results.append(await invoke(self._chunk_call(call, chunk)))
        return self.options.combine(results)


def dispatch(call: Sequence[Any], options: BatchOptions | Mapping[str, Any],
             bindings: ParameterBinding, invoke: Invoke) -> Any:
    """Dispatch one call with batched semantics.

    :param call: Positional argument values for one invocation.
    :param options: Batch options (`parameter`, `chunk_size`, `combine`).
    :param bindings: Parameter table of the operation.
    :param invoke: Executes the operation for a full argument list.
    :raises ConfigurationError: If the options are invalid.
    :raises ParameterNotFound: If the target parameter does not resolve.
    """
    return BatchDispatcher(options, bindings).dispatch(call, invoke)


async def dispatch_async(call: Sequence[Any], options: BatchOptions | Mapping[str, Any],
                         bindings: ParameterBinding, invoke: AsyncInvoke) -> Any:
    """Awaitable variant of `dispatch`.
    """
    return await BatchDispatcher(options, bindings).dispatch_async(call, invoke)
