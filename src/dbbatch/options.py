from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass
from typing import Any

import pandas as pd
import pyarrow as pa
from dbbatch.exceptions import ConfigurationError
from dbbatch.sql import get_param_limit_for_db

__all__ = [
    'BatchOptions',
    'is_collection',
    'flatten_results',
    'sum_results',
    'concat_frames',
    'concat_tables',
]

DEFAULT_CHUNK_SIZE = 1000

_ATOMIC_TYPES = (str, bytes, bytearray, memoryview, Mapping, pd.DataFrame, pa.Table)


def is_collection(value: Any) -> bool:
    """Whether a value is a finite collection whose elements are split or
    flattened.

    Strings, bytes, mappings, DataFrames and Arrow tables are treated as
    single values.
    """
    if isinstance(value, _ATOMIC_TYPES):
        return False
    return isinstance(value, Collection)


def flatten_results(results: list[Any]) -> tuple[Any, ...]:
    """Default combiner.

    Collection results contribute all their elements, anything else
    contributes itself, in chunk order.
    """
    aggregated = []
    for result in results:
        if is_collection(result):
            aggregated.extend(result)
        else:
            aggregated.append(result)
    return tuple(aggregated)


def sum_results(results: list[Any]) -> int:
    """Combiner for row counts returned by DELETE/UPDATE statements."""
    return sum(r for r in results if r is not None)


def concat_frames(results: list[pd.DataFrame]) -> pd.DataFrame:
    """Combiner for operations returning pandas DataFrames.

    Column type metadata in `attrs` is taken from the first frame.
    """
    df = pd.concat(results, ignore_index=True)
    df.attrs = dict(results[0].attrs)
    return df


def concat_tables(results: list[pa.Table]) -> pa.Table:
    """Combiner for operations returning PyArrow tables."""
    return pa.concat_tables(results)


@dataclass
class BatchOptions:
    """Options

    - parameter: name or alias of the argument holding the collection to split
    - chunk_size: maximum number of elements per invocation (default: 1000)
    - combine: callable aggregating the list of per-chunk results
      (default: flatten_results)
    """
    parameter: str = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    combine: Callable[[list[Any]], Any] | None = None

    def __post_init__(self):
        self.validate()
        if self.combine is None:
            self.combine = flatten_results

    def validate(self) -> None:
        """Check invariants.

        :raises ConfigurationError: If chunk_size is not a positive integer or
            parameter is missing.
        """
        if (isinstance(self.chunk_size, bool)
                or not isinstance(self.chunk_size, int)
                or self.chunk_size <= 0):
            raise ConfigurationError(f'chunk_size must be a positive integer (not {self.chunk_size!r})')
        if not self.parameter or not isinstance(self.parameter, str):
            raise ConfigurationError('parameter must be a non-empty string')

    @classmethod
    def from_value(cls, value: 'BatchOptions | Mapping[str, Any]') -> 'BatchOptions':
        """Accept options as an instance or a dict of the same keys."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            try:
                return cls(**value)
            except TypeError as e:
                raise ConfigurationError(f'Invalid batch options: {e}') from e
        raise ConfigurationError(f'Cannot build BatchOptions from {type(value).__name__}')

    @classmethod
    def for_dialect(cls, dialect: str, parameter: str, reserved: int = 0,
                    **kwargs: Any) -> 'BatchOptions':
        """Options sized to a dialect's parameter limit.

        :param reserved: Placeholders used by the query besides the batched values.
        """
        return cls(parameter=parameter,
                   chunk_size=get_param_limit_for_db(dialect) - reserved,
                   **kwargs)
