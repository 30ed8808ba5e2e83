'''Typing support for flag store collaborators'''
from typing import Any, Iterable, Protocol, TypeAlias, Union

from flagstore.dense_bounded import DenseBoundedStore
from flagstore.dense_unbounded import DenseUnboundedStore
from flagstore.sparse import SparseStore
from models.flags import PermissionBit

__all__ = ('LogSink', 'ConcreteStore', 'PermissionLike', 'ColumnValue', 'IndexSequence')

class LogSink(Protocol):
    def write(self, data: bytes, /) -> Any: ...

ConcreteStore:      TypeAlias = Union[DenseBoundedStore, DenseUnboundedStore, SparseStore]
PermissionLike:     TypeAlias = Union[PermissionBit, str]
ColumnValue:        TypeAlias = Union[int, str]
IndexSequence:      TypeAlias = Iterable[int]
