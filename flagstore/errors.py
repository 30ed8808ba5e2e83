from abc import ABC
from typing import Optional
from models.error_codes import StoreErrorFlags

__all__ = ('FlagStoreException', 'OutOfRange', 'InvalidFlagIndex', 'MalformedPayload', 'UnknownPermission')

class FlagStoreException(ABC, Exception):
    '''Abstract base exception class for all flag store exceptions. Carries a short machine-readable code alongside a readable description'''
    code: str
    description: str

    def __init__(self, description: Optional[str] = None):
        self.description = description or self.__class__.description
        super().__init__(self.description)


class OutOfRange(FlagStoreException, IndexError):
    code: str = StoreErrorFlags.OUT_OF_RANGE.value
    description: str = 'Flag index {index} out of range for bounded store of capacity {capacity}'

    def __init__(self, index: int, capacity: int, description: Optional[str] = None):
        super().__init__((description or OutOfRange.description).format(index=index, capacity=capacity))
        self.index = index
        self.capacity = capacity

class InvalidFlagIndex(FlagStoreException, ValueError):
    code: str = StoreErrorFlags.INVALID_INDEX.value
    description: str = 'Flag index must be a non-negative integer, got {index!r}'

    def __init__(self, index: object, description: Optional[str] = None):
        super().__init__((description or InvalidFlagIndex.description).format(index=index))
        self.index = index

class MalformedPayload(FlagStoreException, ValueError):
    code: str = StoreErrorFlags.MALFORMED_PAYLOAD.value
    description: str = 'Malformed serialized flag store payload'

class UnknownPermission(FlagStoreException, ValueError):
    code: str = StoreErrorFlags.UNKNOWN_PERMISSION.value
    description: str = 'Unrecognised permission provided'
