"""
SQL helpers for batched IN clauses.

These have no imports from other dbbatch modules besides exceptions, so they
are safe to import from anywhere in the package.
"""
import logging
import re
from typing import Any

from dbbatch.exceptions import InvalidArgument
from more_itertools import collapse

__all__ = [
    'PARAM_LIMITS',
    'get_dialect_name',
    'get_param_limit_for_db',
    'expand_in_clause',
]

logger = logging.getLogger(__name__)

# Maximum bound parameters per statement
PARAM_LIMITS = {
    'postgresql': 65535,
    'sqlite': 999,
    'mssql': 2100,
}

DEFAULT_PARAM_LIMIT = 999

_DRIVER_DIALECTS = {
    'psycopg': 'postgresql',
    'psycopg2': 'postgresql',
    'sqlite3': 'sqlite',
    'pymssql': 'mssql',
    'pyodbc': 'mssql',
}

_IN_PLACEHOLDER = re.compile(r'\bIN\s*(?:\(\s*(%s|\?)\s*\)|(%s|\?))', re.IGNORECASE)
_PLACEHOLDER = re.compile(r'%s|\?')


def get_dialect_name(obj: Any) -> str:
    """Get dialect name for a database connection or wrapper.
    """
    if hasattr(obj, 'dialect'):
        dialect = obj.dialect
        if isinstance(dialect, str):
            return dialect.lower()
        return str(dialect.name).lower()

    if hasattr(obj, 'driver_connection') and obj.driver_connection is not obj:
        return get_dialect_name(obj.driver_connection)

    module = type(obj).__module__.split('.')[0]
    if module in _DRIVER_DIALECTS:
        return _DRIVER_DIALECTS[module]

    raise AttributeError(f'Cannot determine dialect for {type(obj)}')


def get_param_limit_for_db(dialect: str) -> int:
    """Maximum number of bound parameters a dialect accepts per statement.
    """
    limit = PARAM_LIMITS.get(dialect.lower())
    if limit is None:
        logger.debug(f'No parameter limit known for {dialect}, using {DEFAULT_PARAM_LIMIT}')
        return DEFAULT_PARAM_LIMIT
    return limit


def expand_in_clause(sql: str, values: Any, *args: Any) -> tuple[str, tuple]:
    r"""Expand the first IN clause placeholder into one placeholder per value.

    - "WHERE x IN %s" with values (1, 2, 3)
      -> "WHERE x IN (%s, %s, %s)"
    - "WHERE x IN (?)" with values [1, 2]
      -> "WHERE x IN (?, ?)"
    - "WHERE x IN %s" with values ()
      -> "WHERE x IN (NULL)"

    Nested sequences in `values` are collapsed. `args` fill the remaining
    placeholders in order; the expanded values are spliced in at the
    position of the IN placeholder.

    Parameters
        sql: SQL query string with one IN placeholder
        values: Values for the IN clause
        args: Parameters for other placeholders

    Returns
        Tuple of processed SQL and parameters
    """
    match = _IN_PLACEHOLDER.search(sql)
    if match is None:
        raise InvalidArgument(f'No IN clause placeholder in query: {sql}')

    values = tuple(collapse(values))
    placeholder = match.group(1) or match.group(2)
    if values:
        expanded = f"IN ({', '.join([placeholder] * len(values))})"
    else:
        expanded = 'IN (NULL)'

    preceding = len(_PLACEHOLDER.findall(sql, 0, match.start()))
    params = tuple(args[:preceding]) + values + tuple(args[preceding:])
    return sql[:match.start()] + expanded + sql[match.end():], params
