"""
Batched IN clause queries over DB-API connections.

The values list is split to stay under the dialect's bound parameter limit,
the statement runs once per chunk and the results are combined.
"""
from collections.abc import Callable
from typing import Any

from dbbatch.binding import ParameterBinding
from dbbatch.dispatch import BatchDispatcher
from dbbatch.options import BatchOptions, sum_results
from dbbatch.sql import expand_in_clause, get_dialect_name
from dbbatch.sql import get_param_limit_for_db

__all__ = ['select_in', 'execute_in']

_SELECT_BINDINGS = ParameterBinding(['cn', 'sql', 'values', 'args'], operation='select_in')
_EXECUTE_BINDINGS = ParameterBinding(['cn', 'sql', 'values', 'args'], operation='execute_in')


def _options_for(cn: Any, args: tuple, chunk_size: int | None,
                 combine: Callable[[list[Any]], Any] | None) -> BatchOptions:
    if chunk_size is None:
        chunk_size = get_param_limit_for_db(get_dialect_name(cn)) - len(args)
    return BatchOptions(parameter='values', chunk_size=chunk_size, combine=combine)


def _run(cn: Any, sql: str, values: Any, args: tuple, fetch: bool) -> Any:
    sql, params = expand_in_clause(sql, values, *args)
    cursor = cn.cursor()
    try:
        cursor.execute(sql, params)
        if fetch:
            return cursor.fetchall()
        return cursor.rowcount
    finally:
        cursor.close()


def select_in(cn: Any, sql: str, values: Any, *args: Any,
              chunk_size: int | None = None,
              combine: Callable[[list[Any]], Any] | None = None) -> Any:
    """Run a SELECT with an IN clause placeholder once per chunk of values.

    Without `combine`, returns a list of rows in chunk order. With `combine`,
    the result is always `combine` applied to the list of per-chunk row
    lists, including when the values fit in a single chunk.

    >>> select_in(cn, 'select name from users where id in %s and active = %s',
    ...           ids, True)  # doctest: +SKIP
    """
    options = _options_for(cn, args, chunk_size, combine)
    dispatcher = BatchDispatcher(options, _SELECT_BINDINGS)
    call = [cn, sql, values, args]
    result = dispatcher.dispatch(
        call, lambda c: _run(c[0], c[1], c[2], c[3], fetch=True))
    if combine is None:
        return list(result)
    if dispatcher.plan(call) is None:
        return combine([result])
    return result


def execute_in(cn: Any, sql: str, values: Any, *args: Any,
               chunk_size: int | None = None) -> int:
    """Run an UPDATE or DELETE with an IN clause placeholder once per chunk
    of values and return the total affected row count.
    """
    options = _options_for(cn, args, chunk_size, sum_results)
    dispatcher = BatchDispatcher(options, _EXECUTE_BINDINGS)
    return dispatcher.dispatch(
        [cn, sql, values, args],
        lambda call: _run(call[0], call[1], call[2], call[3], fetch=False))
