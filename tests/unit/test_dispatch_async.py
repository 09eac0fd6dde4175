"""
Unit tests for awaitable batch dispatch.
"""
import asyncio

import pytest
from dbbatch.binding import ParameterBinding
from dbbatch.dispatch import BatchDispatcher, dispatch_async
from dbbatch.exceptions import ParameterNotFound


@pytest.fixture
def bindings():
    return ParameterBinding(['cn', 'ids'], operation='fetch')


def test_unsplit_call(async_recording_invoke, bindings):
    invoke = async_recording_invoke(lambda call: 'rows')
    call = ['conn', [1, 2]]

    result = asyncio.run(dispatch_async(call, {'parameter': 'ids'}, bindings, invoke))

    assert result == 'rows'
    assert invoke.calls == [call]


def test_split_call(async_recording_invoke, bindings):
    invoke = async_recording_invoke(lambda call: [v * 10 for v in call[1]])

    result = asyncio.run(dispatch_async(['conn', list(range(5))],
                                        {'parameter': 'ids', 'chunk_size': 2},
                                        bindings, invoke))

    assert result == (0, 10, 20, 30, 40)
    assert [call[1] for call in invoke.calls] == [[0, 1], [2, 3], [4]]


def test_chunks_awaited_sequentially(bindings):
    """Test that a chunk finishes before the next one starts, even when
    earlier chunks take longer"""
    events = []

    async def invoke(call):
        first = call[1][0]
        events.append(('start', first))
        await asyncio.sleep(0.01 if first == 0 else 0)
        events.append(('end', first))
        return call[1]

    result = asyncio.run(dispatch_async(['conn', [0, 1, 2, 3]],
                                        {'parameter': 'ids', 'chunk_size': 2},
                                        bindings, invoke))

    assert events == [('start', 0), ('end', 0), ('start', 2), ('end', 2)]
    assert result == (0, 1, 2, 3)


def test_first_failure_propagates(async_recording_invoke, bindings):
    def handler(call):
        if call[1][0] == 2:
            raise ValueError('second chunk')
        return call[1]

    invoke = async_recording_invoke(handler)
    with pytest.raises(ValueError, match='second chunk'):
        asyncio.run(dispatch_async(['conn', list(range(6))],
                                   {'parameter': 'ids', 'chunk_size': 2},
                                   bindings, invoke))

    assert invoke.call_count == 2


def test_missing_parameter(async_recording_invoke, bindings):
    invoke = async_recording_invoke()
    with pytest.raises(ParameterNotFound):
        asyncio.run(dispatch_async(['conn', [1]], {'parameter': 'names'}, bindings, invoke))
    assert invoke.call_count == 0


def test_cancellation_skips_remaining_chunks(bindings):
    started = []

    async def invoke(call):
        started.append(call[1][0])
        await asyncio.sleep(10)
        return call[1]

    async def main():
        dispatcher = BatchDispatcher({'parameter': 'ids', 'chunk_size': 1}, bindings)
        task = asyncio.create_task(dispatcher.dispatch_async(['conn', [0, 1, 2]], invoke))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(main())

    assert started == [0]


if __name__ == '__main__':
    __import__('pytest').main([__file__])
