'''Arbitrary-precision integer store. Grows implicitly as higher indices are set'''
from typing import Iterator
from typing_extensions import Self

from flagstore.base import FlagStore, validate_index
from models.variants import StoreVariant

__all__ = ('DenseUnboundedStore',)

class DenseUnboundedStore(FlagStore):
    '''Flags held as the bits of one unsigned integer, bit `b` being flag `b`'''
    __slots__ = ('_bits', '_count')
    variant = StoreVariant.DENSE_UNBOUNDED

    def __init__(self) -> None:
        self._bits: int = 0
        self._count: int = 0

    @classmethod
    def from_bits(cls, bits: int) -> Self:
        '''Adopt an unsigned integer wholesale, bit `b` becoming flag `b`'''
        if isinstance(bits, bool) or not isinstance(bits, int) or bits < 0:
            raise ValueError(f'Flag bits must be an unsigned integer, got {bits!r}')
        store = cls()
        store._bits = bits
        store._count = bits.bit_count()
        return store

    @property
    def bits(self) -> int:
        return self._bits

    def set(self, index: int) -> None:
        validate_index(index)
        if not (self._bits >> index) & 1:
            self._bits |= 1 << index
            self._count += 1

    def clear(self, index: int) -> None:
        validate_index(index)
        # Only an index below bit_length can be set, so the mask stays within the current integer
        if (self._bits >> index) & 1:
            self._bits ^= 1 << index
            self._count -= 1

    def test(self, index: int) -> bool:
        validate_index(index)
        return bool((self._bits >> index) & 1)

    def toggle(self, index: int) -> bool:
        validate_index(index)
        self._bits ^= 1 << index
        state = bool((self._bits >> index) & 1)
        self._count += 1 if state else -1
        return state

    def __iter__(self) -> Iterator[int]:
        # Scan the binary digits once, lowest bit first
        digits: str = format(self._bits, 'b')[::-1]
        position: int = digits.find('1')
        while position != -1:
            yield position
            position = digits.find('1', position + 1)

    def __len__(self) -> int:
        return self._count

    def copy(self) -> Self:
        return self.__class__.from_bits(self._bits)
