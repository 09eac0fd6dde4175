"""
Unit tests for the cache manager.
"""
import cachetools
import pytest
from dbbatch.cache import Cache, cached_by_function


@pytest.fixture
def cache_manager():
    """Provide the cache manager instance"""
    return Cache.get_instance()


def test_singleton(cache_manager):
    assert Cache.get_instance() is cache_manager


def test_get_cache_is_lru(cache_manager):
    cache = cache_manager.get_cache('lru_test', maxsize=2)
    assert isinstance(cache, cachetools.LRUCache)
    assert cache.maxsize == 2
    assert cache_manager.get_cache('lru_test') is cache_manager.get_cache('lru_test')


def test_clear_cache(cache_manager):
    first = cache_manager.get_cache('first')
    second = cache_manager.get_cache('second')
    first['k'] = 1
    second['k'] = 2

    cache_manager.clear_cache('first')

    assert 'k' not in first
    assert second['k'] == 2

    cache_manager.clear_all()
    assert 'k' not in second


def test_cached_by_function():
    built = []

    @cached_by_function('builder_test')
    def build(func):
        built.append(func)
        return func.__name__.upper()

    def target():
        pass

    assert build(target) == 'TARGET'
    assert build(target) == 'TARGET'
    assert built == [target]

    Cache.get_instance().clear_cache('builder_test')
    assert build(target) == 'TARGET'
    assert len(built) == 2


if __name__ == '__main__':
    __import__('pytest').main([__file__])
