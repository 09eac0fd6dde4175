"""
Recording invoke callables for dispatcher tests.

Usage:
    def test_dispatch(recording_invoke):
        invoke = recording_invoke(lambda call: len(call[0]))
        dispatch([ids], options, bindings, invoke)
        assert invoke.calls == [[ids[:100]], [ids[100:]]]
"""
import pytest


class RecordingInvoke:
    """Callable that records each argument list before delegating."""

    def __init__(self, handler=None):
        self.handler = handler or (lambda call: None)
        self.calls = []

    def __call__(self, call):
        self.calls.append(call)
        return self.handler(call)

    @property
    def call_count(self):
        return len(self.calls)


class AsyncRecordingInvoke(RecordingInvoke):
    """Awaitable variant; records the call when the coroutine starts."""

    async def __call__(self, call):
        self.calls.append(call)
        return self.handler(call)


@pytest.fixture
def recording_invoke():
    """Factory for recording invoke callables."""
    def factory(handler=None):
        return RecordingInvoke(handler)

    return factory


@pytest.fixture
def async_recording_invoke():
    """Factory for awaitable recording invoke callables."""
    def factory(handler=None):
        return AsyncRecordingInvoke(handler)

    return factory
