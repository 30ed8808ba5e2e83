'''
Persistence mappings for flag stores.

Bounded stores map onto a single unsigned integer (bit `b` being flag `b`), or its decimal/hex text, for storage in
an external record. Any store can also be written as an ascending, de-duplicated sequence of set indices.
`dumps`/`loads` wrap either form in an orjson document carrying the variant and shape needed to rebuild the store.
'''
from typing import Annotated, Any, Literal, Optional, Union
from typing_extensions import Self

import orjson
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from flagstore.base import FlagStore, validate_index
from flagstore.dense_bounded import DenseBoundedStore
from flagstore.dense_unbounded import DenseUnboundedStore
from flagstore.errors import InvalidFlagIndex, MalformedPayload
from flagstore.tiering import create_store
from flagstore.typing import IndexSequence
from models.constants import FLAG_CONSTANTS
from models.variants import StoreVariant

__all__ = ('parse_field', 'to_integer', 'from_integer',
           'to_text', 'from_text',
           'to_indices', 'from_indices',
           'StorePayload', 'dumps', 'loads')

def _indices_to_integer(indices: list[int]) -> int:
    # `indices` is ascending, so the last one sizes the buffer
    if not indices:
        return 0
    buffer = bytearray((indices[-1] >> 3) + 1)
    for index in indices:
        buffer[index >> 3] |= 1 << (index & 7)
    return int.from_bytes(buffer, 'little')

def to_integer(store: FlagStore) -> int:
    if isinstance(store, DenseUnboundedStore):
        return store.bits
    if isinstance(store, DenseBoundedStore):
        return store.to_bits()
    return _indices_to_integer(store.indices())

def parse_field(value: Union[int, str]) -> int:
    '''Read a flag field given as an unsigned integer, or as the decimal/hex text of one'''
    if isinstance(value, str):
        value = _parse_text(value)
    elif isinstance(value, bool) or not isinstance(value, int):
        raise MalformedPayload(f'Expected an integer flag field, got {type(value).__name__}')
    if value < 0:
        raise MalformedPayload(f'Flag field must be unsigned, got {value}')
    return value

def from_integer(value: int,
                 variant: StoreVariant = StoreVariant.DENSE_BOUNDED,
                 capacity: Optional[int] = None,
                 word_width: Optional[int] = None) -> FlagStore:
    '''
    Rebuild a store from its integer form.

    For `DENSE_BOUNDED` targets without an explicit capacity, the store is sized to the packaged default capacity or
    the smallest whole number of words covering the integer, whichever is larger. An integer wider than an explicit
    capacity (rounded up to whole words) raises `OutOfRange`.
    '''
    if isinstance(value, str):
        raise MalformedPayload('Expected an integer flag field, got str')
    value = parse_field(value)

    if variant is StoreVariant.DENSE_BOUNDED:
        if capacity is None:
            capacity = max(value.bit_length(), FLAG_CONSTANTS.store.default_capacity)
        return DenseBoundedStore.from_bits(value, capacity, word_width)
    if variant is StoreVariant.DENSE_UNBOUNDED:
        return DenseUnboundedStore.from_bits(value)

    store: FlagStore = create_store(variant)
    for index in DenseUnboundedStore.from_bits(value):
        store.set(index)
    return store

def to_text(store: FlagStore, base: Optional[Literal[10, 16]] = None) -> str:
    if base is None:
        base = FLAG_CONSTANTS.serialization.default_text_base
    if base == 16:
        return hex(to_integer(store))
    elif base == 10:
        return str(to_integer(store))
    raise ValueError(f'Unsupported text base {base}, must be 10 or 16')

def _parse_text(text: str) -> int:
    text = text.strip().lower()
    try:
        if text.startswith('0x'):
            return int(text[2:], 16)
        if not text.isdigit():
            raise ValueError
        return int(text, 10)
    except ValueError:
        raise MalformedPayload(f'Invalid textual flag field: {text[:64]!r}') from None

def from_text(text: str,
              variant: StoreVariant = StoreVariant.DENSE_BOUNDED,
              capacity: Optional[int] = None,
              word_width: Optional[int] = None) -> FlagStore:
    if not isinstance(text, str):
        raise MalformedPayload(f'Expected textual flag field, got {type(text).__name__}')
    return from_integer(_parse_text(text), variant, capacity, word_width)

def to_indices(store: FlagStore) -> list[int]:
    return store.indices()

def _check_indices(indices: IndexSequence) -> list[int]:
    checked: list[int] = []
    previous: int = -1
    for index in indices:
        try:
            validate_index(index)
        except InvalidFlagIndex as invalid_index:
            raise MalformedPayload(invalid_index.description) from None
        if index <= previous:
            raise MalformedPayload(f'Flag indices must be strictly ascending, got {index} after {previous}')
        checked.append(index)
        previous = index
    return checked

def from_indices(indices: IndexSequence,
                 variant: StoreVariant = StoreVariant.SPARSE,
                 capacity: Optional[int] = None,
                 word_width: Optional[int] = None) -> FlagStore:
    '''Rebuild a store from an ascending, de-duplicated sequence of set indices'''
    checked: list[int] = _check_indices(indices)
    if variant is StoreVariant.DENSE_BOUNDED:
        if capacity is None:
            capacity = max(checked[-1] + 1 if checked else 0, FLAG_CONSTANTS.store.default_capacity)
        return DenseBoundedStore.from_bits(_indices_to_integer(checked), capacity, word_width)
    if variant is StoreVariant.DENSE_UNBOUNDED:
        return DenseUnboundedStore.from_bits(_indices_to_integer(checked))

    store: FlagStore = create_store(variant)
    for index in checked:
        store.set(index)
    return store


class StorePayload(BaseModel):
    '''Schema of a serialized flag store record'''
    variant: StoreVariant
    capacity: Annotated[Optional[int], Field(default=None, ge=0)]
    word_width: Annotated[Optional[int], Field(default=None, ge=1, le=1024)]
    bits: Annotated[Optional[str], Field(default=None, pattern=r'^0x[0-9a-f]+$')]
    indices: Annotated[Optional[list[Annotated[int, Field(ge=0)]]], Field(default=None)]

    @field_validator('indices', mode='after')
    @classmethod
    def validate_indices(cls, indices: Optional[list[int]]) -> Optional[list[int]]:
        if indices is not None and any(later <= earlier for earlier, later in zip(indices, indices[1:])):
            raise ValueError('Flag indices must be strictly ascending')
        return indices

    @model_validator(mode='after')
    def payload_semantic_check(self) -> Self:
        if (self.bits is None) == (self.indices is None):
            raise ValueError('Exactly one of bits or indices must be provided')
        if self.variant is StoreVariant.DENSE_BOUNDED:
            if self.capacity is None or self.word_width is None:
                raise ValueError('Bounded payloads require capacity and word_width')
        elif self.capacity is not None or self.word_width is not None:
            raise ValueError(f'Capacity and word_width only apply to bounded payloads, not {self.variant.value}')

        # Dense variants allocate up to their highest flag, sparse ones only per flag
        limit: int = FLAG_CONSTANTS.serialization.max_payload_capacity
        if self.capacity is not None and self.capacity > limit:
            raise ValueError(f'Capacity {self.capacity} exceeds payload capacity limit of {limit}')
        if self.variant is not StoreVariant.SPARSE and self.indices and self.indices[-1] >= limit:
            raise ValueError(f'Flag index {self.indices[-1]} exceeds payload capacity limit of {limit}')
        return self

    @classmethod
    def from_store(cls, store: FlagStore) -> 'StorePayload':
        if isinstance(store, DenseBoundedStore):
            return cls(variant=store.variant, capacity=store.capacity, word_width=store.word_width, bits=hex(to_integer(store)))
        return cls(variant=store.variant, indices=to_indices(store))

    def to_store(self) -> FlagStore:
        if self.bits is not None:
            return from_integer(int(self.bits, 16), self.variant, self.capacity, self.word_width)
        return from_indices(self.indices or (), self.variant, self.capacity, self.word_width)

def dumps(store: FlagStore) -> bytes:
    return orjson.dumps(StorePayload.from_store(store).model_dump(mode='json', exclude_none=True))

def loads(payload: Union[bytes, bytearray, memoryview, str]) -> FlagStore:
    if len(payload) > FLAG_CONSTANTS.serialization.max_payload_bytesize:
        raise MalformedPayload(f'Payload of {len(payload)} bytes exceeds limit of {FLAG_CONSTANTS.serialization.max_payload_bytesize}')
    try:
        document: Any = orjson.loads(payload)
        return StorePayload.model_validate(document).to_store()
    except orjson.JSONDecodeError as decode_error:
        raise MalformedPayload(f'Payload is not valid JSON: {decode_error}') from None
    except ValidationError as validation_error:
        raise MalformedPayload(f'Invalid flag store payload: {validation_error.error_count()} error(s)') from validation_error
