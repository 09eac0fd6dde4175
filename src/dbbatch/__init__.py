"""
Transparent batching of oversized IN clause collections.

An operation whose collection argument exceeds a configured size is called
once per chunk and the chunk results are combined:

- Decorator: @batch_in_clause('ids', chunk_size=500)
- Explicit: dispatch(call, {'parameter': 'ids'}, bindings, invoke)
- DB-API helpers: select_in(cn, sql, values), execute_in(cn, sql, values)
"""
__version__ = '0.1.0'

from dbbatch.binding import Param, ParameterBinding, ParameterSpec
from dbbatch.binding import bindings_for
from dbbatch.decorators import batch_in_clause
from dbbatch.dispatch import BatchDispatcher, dispatch, dispatch_async
from dbbatch.exceptions import BatchError, ConfigurationError
from dbbatch.exceptions import InvalidArgument, ParameterNotFound
from dbbatch.options import BatchOptions, concat_frames, concat_tables
from dbbatch.options import flatten_results, is_collection, sum_results
from dbbatch.partition import Partition, partition
from dbbatch.query import execute_in, select_in
from dbbatch.sql import expand_in_clause, get_dialect_name
from dbbatch.sql import get_param_limit_for_db

__all__ = [
    'batch_in_clause',
    'dispatch',
    'dispatch_async',
    'BatchDispatcher',
    'BatchOptions',
    'partition',
    'Partition',
    'Param',
    'ParameterSpec',
    'ParameterBinding',
    'bindings_for',
    'is_collection',
    'flatten_results',
    'sum_results',
    'concat_frames',
    'concat_tables',
    'select_in',
    'execute_in',
    'expand_in_clause',
    'get_dialect_name',
    'get_param_limit_for_db',
    'BatchError',
    'ConfigurationError',
    'InvalidArgument',
    'ParameterNotFound',
]
