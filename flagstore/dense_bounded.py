'''Fixed-width word array store. Capacity changes only through an explicit resize'''
from typing import Iterator, Optional
from typing_extensions import Self

from flagstore.base import FlagStore, validate_index
from flagstore.errors import OutOfRange
from models.constants import FLAG_CONSTANTS
from models.variants import StoreVariant

__all__ = ('DenseBoundedStore',)

def _words_for(capacity: int, word_width: int) -> int:
    return -(-capacity // word_width)

class DenseBoundedStore(FlagStore):
    '''
    Flags packed into a list of unsigned words of `word_width` bits each.
    Index `i` lives in word `i // word_width` at bit `i % word_width`.

    The requested capacity is rounded up to a whole number of words. Setting
    a flag at or beyond capacity raises `OutOfRange`; clearing or testing one
    is answered without error since such a flag is false by definition.
    '''
    __slots__ = ('_words', '_word_width', '_word_mask', '_count')
    variant = StoreVariant.DENSE_BOUNDED

    def __init__(self, capacity: Optional[int] = None, word_width: Optional[int] = None) -> None:
        if capacity is None:
            capacity = FLAG_CONSTANTS.store.default_capacity
        if word_width is None:
            word_width = FLAG_CONSTANTS.store.word_width
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ValueError(f'Capacity must be a non-negative integer, got {capacity!r}')
        if isinstance(word_width, bool) or not isinstance(word_width, int) or word_width <= 0:
            raise ValueError(f'Word width must be a positive integer, got {word_width!r}')

        self._word_width: int = word_width
        self._word_mask: int = (1 << word_width) - 1
        self._words: list[int] = [0] * _words_for(capacity, word_width)
        self._count: int = 0

    @classmethod
    def from_bits(cls, bits: int, capacity: Optional[int] = None, word_width: Optional[int] = None) -> Self:
        '''Unpack an unsigned integer into words, bit `b` becoming flag `b`. Raises `OutOfRange` when `bits` does not fit `capacity`'''
        if isinstance(bits, bool) or not isinstance(bits, int) or bits < 0:
            raise ValueError(f'Flag bits must be an unsigned integer, got {bits!r}')
        store = cls(capacity, word_width)
        if bits.bit_length() > store.capacity:
            raise OutOfRange(bits.bit_length() - 1, store.capacity)

        # One pass over the binary digits, highest word first
        width: int = store._word_width
        digits: str = format(bits, 'b').zfill(store.capacity)
        top: int = len(digits)
        store._words = [int(digits[top - (word_index + 1) * width : top - word_index * width], 2)
                        for word_index in range(len(store._words))]
        store._count = bits.bit_count()
        return store

    def to_bits(self) -> int:
        if not self._words:
            return 0
        width: int = self._word_width
        return int(''.join(format(word, f'0{width}b') for word in reversed(self._words)), 2)

    @property
    def word_width(self) -> int:
        return self._word_width

    @property
    def capacity(self) -> int:
        return len(self._words) * self._word_width

    @property
    def words(self) -> tuple[int, ...]:
        return tuple(self._words)

    def _locate(self, index: int) -> tuple[int, int]:
        return divmod(index, self._word_width)

    def set(self, index: int) -> None:
        validate_index(index)
        if index >= self.capacity:
            raise OutOfRange(index, self.capacity)
        word_index, bit = self._locate(index)
        word = self._words[word_index]
        if not (word >> bit) & 1:
            self._words[word_index] = word | (1 << bit)
            self._count += 1

    def clear(self, index: int) -> None:
        validate_index(index)
        if index >= self.capacity:
            return
        word_index, bit = self._locate(index)
        word = self._words[word_index]
        if (word >> bit) & 1:
            self._words[word_index] = word & ~(1 << bit) & self._word_mask
            self._count -= 1

    def test(self, index: int) -> bool:
        validate_index(index)
        if index >= self.capacity:
            return False
        word_index, bit = self._locate(index)
        return bool((self._words[word_index] >> bit) & 1)

    def toggle(self, index: int) -> bool:
        validate_index(index)
        if index >= self.capacity:
            # An out-of-range flag is false, so toggling it would be a set
            raise OutOfRange(index, self.capacity)
        word_index, bit = self._locate(index)
        word = self._words[word_index] ^ (1 << bit)
        self._words[word_index] = word
        state = bool((word >> bit) & 1)
        self._count += 1 if state else -1
        return state

    def resize(self, capacity: int) -> None:
        '''Reallocate the word list to hold `capacity` flags, rounded up to whole words. Existing bit positions are preserved'''
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ValueError(f'Capacity must be a non-negative integer, got {capacity!r}')
        word_count: int = _words_for(capacity, self._word_width)
        current: int = len(self._words)
        if word_count >= current:
            self._words.extend([0] * (word_count - current))
            return

        if any(self._words[word_count:]):
            highest: int = self.highest()
            raise OutOfRange(highest, word_count * self._word_width,
                             'Shrinking to capacity {capacity} would drop set flag {index}')
        del self._words[word_count:]

    def grow_to(self, index: int) -> None:
        '''Ensure `index` is addressable, resizing only when it is not'''
        validate_index(index)
        if index >= self.capacity:
            self.resize(index + 1)

    def highest(self) -> int:
        '''Highest set index, -1 for an empty store'''
        for word_index in range(len(self._words) - 1, -1, -1):
            word = self._words[word_index]
            if word:
                return word_index * self._word_width + word.bit_length() - 1
        return -1

    def __iter__(self) -> Iterator[int]:
        for word_index, word in enumerate(self._words):
            base: int = word_index * self._word_width
            while word:
                low_bit: int = word & -word
                yield base + low_bit.bit_length() - 1
                word ^= low_bit

    def __len__(self) -> int:
        return self._count

    def copy(self) -> Self:
        duplicate = self.__class__(0, self._word_width)
        duplicate._words = self._words.copy()
        duplicate._count = self._count
        return duplicate

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(capacity={self.capacity}, word_width={self._word_width}, indices={self.indices()})'
