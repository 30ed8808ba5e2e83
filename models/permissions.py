from enum import Enum
from types import MappingProxyType
from models.flags import PermissionBit

__all__ = ('RoleTypes', 'ROLE_MAPPING',)

class RoleTypes(Enum):
    OWNER       = 'owner'
    MANAGER     = 'manager'
    READER      = 'reader'
    EDITOR      = 'editor'


ROLE_MAPPING: MappingProxyType[RoleTypes, frozenset[PermissionBit]] = MappingProxyType(
    {
        RoleTypes.READER : frozenset({PermissionBit.READ}),
        RoleTypes.EDITOR : frozenset({PermissionBit.READ, PermissionBit.WRITE}),
        RoleTypes.MANAGER : frozenset({PermissionBit.READ, PermissionBit.WRITE, PermissionBit.DELETE,
                                       PermissionBit.SHARE, PermissionBit.MANAGE}),
        RoleTypes.OWNER : frozenset(PermissionBit)
    }
)
