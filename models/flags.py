'''Module containing named permission bits for single-word permission fields'''
from enum import Enum
from types import MappingProxyType
from typing import Final

__all__ = ('PermissionBit', 'PERMISSION_BITS_CHECK', 'PERMISSION_NAME_MAPPING')

class PermissionBit(Enum):
    '''Named bit positions within a permission word'''
    # Resource access (lower nibble)
    READ        = 0
    WRITE       = 1
    DELETE      = 2
    ADMIN       = 3

    # Resource control
    SHARE       = 4
    PUBLICISE   = 5     # Allow read access by all users
    TRANSFER    = 6     # Transfer ownership entirely
    MANAGE      = 7     # Grant and revoke roles of other users

    @property
    def mask(self) -> int:
        return 1 << self.value

PERMISSION_BITS_CHECK: int = 0
for permission in PermissionBit:
    PERMISSION_BITS_CHECK |= permission.mask

PERMISSION_NAME_MAPPING: Final[MappingProxyType[str, PermissionBit]] = MappingProxyType(
    {permission.name.lower() : permission for permission in PermissionBit}
)
