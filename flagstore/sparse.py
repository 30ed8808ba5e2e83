'''Sparse store holding only the indices currently set'''
from typing import Iterator
from typing_extensions import Self

from flagstore.base import FlagStore, validate_index
from models.variants import StoreVariant

__all__ = ('SparseStore',)

class SparseStore(FlagStore):
    __slots__ = ('_indices',)
    variant = StoreVariant.SPARSE

    def __init__(self) -> None:
        self._indices: set[int] = set()

    def set(self, index: int) -> None:
        self._indices.add(validate_index(index))

    def clear(self, index: int) -> None:
        self._indices.discard(validate_index(index))

    def test(self, index: int) -> bool:
        return validate_index(index) in self._indices

    def toggle(self, index: int) -> bool:
        validate_index(index)
        if index in self._indices:
            self._indices.remove(index)
            return False
        self._indices.add(index)
        return True

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._indices))

    def __len__(self) -> int:
        return len(self._indices)

    def copy(self) -> Self:
        duplicate = self.__class__()
        duplicate._indices = self._indices.copy()
        return duplicate
