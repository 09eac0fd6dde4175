"""
Parameter binding tables: resolve a target parameter name to a position.

A table is built once per operation signature and is read-only afterwards,
so one table can be shared by concurrent calls.

Aliases are declared with ``typing.Annotated``:

    def find_names(cn, id_list: Annotated[list[int], Param('ids')]): ...
"""
import inspect
import logging
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from dbbatch.cache import cached_by_function
from dbbatch.exceptions import ParameterNotFound

logger = logging.getLogger(__name__)

__all__ = ['Param', 'ParameterSpec', 'ParameterBinding', 'bindings_for']


@dataclass(frozen=True)
class Param:
    """Alias marker for a parameter, distinct from its declared name.
    """
    value: str


@dataclass(frozen=True)
class ParameterSpec:
    """Declared name and optional alias of one positional parameter.
    """
    name: str
    alias: str | None = None


class ParameterBinding:
    """Name-to-index table for one operation signature.

    Resolution checks aliases across all parameters first, then declared
    names. Within each pass the lowest index wins.
    """

    def __init__(self, parameters: Iterable[ParameterSpec | str | tuple[str, str | None]],
                 operation: str | None = None):
        self.operation = operation
        self.parameters: tuple[ParameterSpec, ...] = tuple(
            _as_spec(p) for p in parameters)
        self._aliases: dict[str, int] = {}
        self._names: dict[str, int] = {}
        for index, spec in enumerate(self.parameters):
            if spec.alias is not None:
                self._aliases.setdefault(spec.alias, index)
            self._names.setdefault(spec.name, index)

    @classmethod
    def from_callable(cls, func: Callable[..., Any]) -> 'ParameterBinding':
        """Build a table from a callable's signature and `Param` annotations.
        """
        func = getattr(func, '__func__', func)
        signature = _signature(func)
        specs = [ParameterSpec(name, _alias_of(p.annotation))
                 for name, p in signature.parameters.items()]
        return cls(specs, operation=getattr(func, '__name__', None))

    @property
    def names(self) -> list[str]:
        return [spec.name for spec in self.parameters]

    def resolve(self, parameter: str) -> int:
        """Return the position of `parameter`, by alias first, then by name.

        :raises ParameterNotFound: If no parameter matches.
        """
        if parameter in self._aliases:
            return self._aliases[parameter]
        if parameter in self._names:
            return self._names[parameter]
        raise ParameterNotFound(parameter, self.operation)

    def __len__(self) -> int:
        return len(self.parameters)

    def __repr__(self) -> str:
        return f'ParameterBinding({list(self.parameters)!r}, operation={self.operation!r})'


@cached_by_function('bindings')
def bindings_for(func: Callable[..., Any]) -> ParameterBinding:
    """Cached `ParameterBinding.from_callable`.
    """
    return ParameterBinding.from_callable(func)


def _as_spec(parameter) -> ParameterSpec:
    if isinstance(parameter, ParameterSpec):
        return parameter
    if isinstance(parameter, str):
        return ParameterSpec(parameter)
    name, alias = parameter
    return ParameterSpec(name, alias)


def _signature(func) -> inspect.Signature:
    try:
        return inspect.signature(func, eval_str=True)
    except NameError as e:
        logger.debug(f'Unresolved annotations on {func!r}, using raw signature: {e}')
        return inspect.signature(func)


def _alias_of(annotation) -> str | None:
    if typing.get_origin(annotation) is not typing.Annotated:
        return None
    for meta in annotation.__metadata__:
        if isinstance(meta, Param):
            return meta.value
    return None
