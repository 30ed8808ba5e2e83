'''Uniform contract shared by every flag store representation'''
from abc import ABC, abstractmethod
from typing import Any, Iterator
from typing_extensions import Self

from flagstore.errors import InvalidFlagIndex
from models.variants import StoreVariant

__all__ = ('FlagStore', 'validate_index')

def validate_index(index: Any) -> int:
    # bool is an int subclass but never a meaningful flag index
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise InvalidFlagIndex(index)
    return index

class FlagStore(ABC):
    '''
    Boolean flags addressed by non-negative integer indices. Every flag starts out false.

    Stores are not safe for concurrent mutation, callers sharing a store between threads must guard it with a single lock.
    '''
    __slots__ = ()
    variant: StoreVariant

    @abstractmethod
    def set(self, index: int) -> None: ...

    @abstractmethod
    def clear(self, index: int) -> None: ...

    @abstractmethod
    def test(self, index: int) -> bool: ...

    @abstractmethod
    def toggle(self, index: int) -> bool:
        '''Flip the flag at `index` and return its new state'''

    @abstractmethod
    def __iter__(self) -> Iterator[int]:
        '''Iterate over set indices in ascending order'''

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def copy(self) -> Self: ...

    def indices(self) -> list[int]:
        return list(self)

    def __contains__(self, index: object) -> bool:
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            return False
        return self.test(index)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlagStore):
            return NotImplemented
        return len(self) == len(other) and all(index in other for index in self)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.indices()})'
